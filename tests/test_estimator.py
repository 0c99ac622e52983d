import pytest

from unwrapped_stats.aggregator import Aggregator
from unwrapped_stats.estimator import (
    ALBUM_PRICE, GBP_TO_USD, Currency, MonetaryEstimator
)

from conftest import TODAY, album_listens, records

@pytest.fixture
def gbp():
    return MonetaryEstimator(Currency.GBP)

@pytest.fixture
def usd():
    return MonetaryEstimator(Currency.USD)

def test_stream_estimate_usd(usd):
    estimate = usd.stream_estimate(1000)
    assert estimate.label == pytest.approx(4.0)
    assert estimate.artist == pytest.approx(0.8)

def test_stream_estimate_gbp_uses_single_rate(gbp, usd):
    assert gbp.stream_estimate(1000).label == pytest.approx(4.0 / GBP_TO_USD)
    assert gbp.stream_estimate(1000).artist * GBP_TO_USD == pytest.approx(usd.stream_estimate(1000).artist)

def test_band_estimate(usd):
    band = usd.band_estimate(1000)
    assert (band.label_low, band.label_high) == pytest.approx((3.0, 5.0))
    assert (band.artist_low, band.artist_high) == pytest.approx((0.6, 1.0))

def test_currency_symbols_and_conversion(gbp, usd):
    assert gbp.currency_symbol == "£"
    assert usd.currency_symbol == "$"
    assert gbp.convert_from_gbp(10) == 10
    assert usd.convert_from_gbp(10) == pytest.approx(12.7)
    assert MonetaryEstimator("USD").currency is Currency.USD

def test_unknown_currency_rejected():
    with pytest.raises(ValueError):
        MonetaryEstimator("EUR")

def test_average_listens_guards_zero_artists():
    assert MonetaryEstimator.average_listens(0, 0) == 0
    assert MonetaryEstimator.average_listens(10, 4) == 2.5

def test_subscription_cost_converted_to_usd(gbp, usd):
    in_gbp = gbp.subscription_cost(2022, 2024, today=TODAY)
    in_usd = usd.subscription_cost(2022, 2024, today=TODAY)
    assert in_gbp.total_paid == pytest.approx(251.76)
    assert in_usd.total_paid == pytest.approx(251.76 * GBP_TO_USD)
    assert [p.monthly_price for p in in_usd.periods] == pytest.approx([9.99 * GBP_TO_USD, 10.99 * GBP_TO_USD])
    assert sum(c.yearly_total for c in in_usd.breakdown) == pytest.approx(in_usd.total_paid)

def test_subscription_cost_keeps_unpriced_years_in_usd(usd):
    cost = usd.subscription_cost(2007, 2010, today=TODAY)
    assert cost.unpriced_years == [2007, 2008]
    assert cost.periods[0].monthly_price is None

def album_summary():
    return Aggregator().process(records(
        *album_listens("Loved", "A", track_count=10, plays=60),
        *album_listens("Liked", "B", track_count=8, plays=40),
        *album_listens("Skimmed", "C", track_count=9, plays=18),
        *album_listens("Single", "D", track_count=2, plays=100),
    ), today=TODAY)

def test_album_purchase_alternative_default_threshold(gbp):
    result = gbp.album_purchase_alternative(album_summary())
    assert result.threshold == 5
    assert [a.album_name for a in result.albums] == ["Loved", "Liked"]
    assert result.album_count == 2
    assert result.total_cost == pytest.approx(2 * ALBUM_PRICE[Currency.GBP])
    assert result.artist_earnings == pytest.approx(result.total_cost * 0.20)

def test_album_purchase_alternative_custom_threshold(usd):
    result = usd.album_purchase_alternative(album_summary(), threshold=2)
    assert [a.album_name for a in result.albums] == ["Loved", "Liked", "Skimmed"]
    assert result.total_cost == pytest.approx(3 * 12.99)
    assert usd.album_purchase_alternative(album_summary(), threshold=100).album_count == 0

def test_purchase_multiple(usd):
    assert usd.purchase_multiple(1000) == pytest.approx(12.99 * 0.20 / 0.8)
    assert usd.purchase_multiple(0) is None
