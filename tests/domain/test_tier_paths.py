import pytest

from tiermedia.domain.enums.connection_speed import ConnectionSpeed
from tiermedia.domain.enums.quality_tier import QualityTier
from tiermedia.domain.policies.tier_paths import derivative_sizes, path_for_tier, tier_for_speed
from tests.fakes import make_descriptor


@pytest.mark.parametrize(
    "tier,expected",
    [
        (QualityTier.thumbnail, "u1/b1/x_thumb.jpg"),
        (QualityTier.preview, "u1/b1/x_preview.jpg"),
        (QualityTier.medium, "u1/b1/x_medium.jpg"),
        (QualityTier.full, "u1/b1/x.jpg"),
    ],
)
def test_path_for_tier_uses_derivative_when_present(tier, expected):
    assert path_for_tier(make_descriptor(), tier) == expected


def test_path_for_tier_falls_back_to_original():
    d = make_descriptor(thumbnail_path=None, preview_path="", medium_path=None)
    assert {path_for_tier(d, t) for t in QualityTier} == {"u1/b1/x.jpg"}


def test_path_for_tier_none_when_nothing_usable():
    d = make_descriptor(thumbnail_path=None)
    d.original_path = ""
    assert path_for_tier(d, QualityTier.thumbnail) is None
    assert path_for_tier(d, QualityTier.full) is None


def test_tier_for_speed():
    assert tier_for_speed(ConnectionSpeed.slow) is QualityTier.thumbnail
    assert tier_for_speed() is QualityTier.preview
    assert tier_for_speed("fast") is QualityTier.medium


def test_derivative_sizes_sorted_and_validated():
    out = derivative_sizes({"medium": 800, "thumbnail": 150, "preview": "300"})
    assert list(out.items()) == [
        (QualityTier.thumbnail, 150),
        (QualityTier.preview, 300),
        (QualityTier.medium, 800),
    ]

    with pytest.raises(ValueError):
        derivative_sizes({"full": 4000})
    with pytest.raises(ValueError):
        derivative_sizes({"thumbnail": 0})
    with pytest.raises(ValueError):
        derivative_sizes({"huge": 10})
