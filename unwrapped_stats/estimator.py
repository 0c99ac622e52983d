"""Monetary estimates derived from play counts"""
import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional

from unwrapped_stats.models.stats import ListeningSummary, REAL_ALBUM_MIN_TRACKS
from unwrapped_stats.pricing import (
    PricePeriodTotal, SubscriptionCost, YearCharge, reconcile_subscription
)

logger = logging.getLogger(__name__)

# --- Payout policy constants ---
# Average label payout per stream (USD)
PAY_PER_STREAM_USD = 0.004
# Artists receive roughly this share of what the label earns from streaming
ARTIST_SHARE_OF_STREAMING = 0.20
# Share of an album sale reaching the artist
ARTIST_SHARE_OF_ALBUM = 0.20
# Low/high per-stream band used by the band estimate mode (USD)
PAY_PER_STREAM_LOW_USD = 0.003
PAY_PER_STREAM_HIGH_USD = 0.005
# Minimum album plays for an album to count as "worth buying"
DEFAULT_ALBUM_PURCHASE_THRESHOLD = 5
# Approximate exchange rate, 1 GBP in USD
GBP_TO_USD = 1.27
# ------------------------------------

class Currency(str, Enum):
    GBP = 'GBP'
    USD = 'USD'

ALBUM_PRICE = {
    Currency.GBP: 10.00,
    Currency.USD: 12.99,
}

CURRENCY_SYMBOLS = {
    Currency.GBP: '£',
    Currency.USD: '$',
}

@dataclass
class StreamEstimate:
    """What the label and the artist earned from a number of streams"""
    plays: int
    label: float
    artist: float

@dataclass
class BandEstimate:
    """Low/high payout band for a number of streams"""
    plays: int
    label_low: float
    label_high: float
    artist_low: float
    artist_high: float

@dataclass
class PurchasedAlbum:
    album_name: str
    artist_name: str
    plays: int
    total_track_plays: int

@dataclass
class AlbumPurchaseAlternative:
    """Counterfactual: buying every album played at least `threshold` times"""
    threshold: int
    album_count: int
    total_cost: float
    artist_earnings: float
    albums: List[PurchasedAlbum] = field(default_factory=list)

class MonetaryEstimator:
    """Converts play counts into payout, subscription and purchase estimates in one currency"""

    def __init__(self, currency: Currency = Currency.GBP):
        self.currency = Currency(currency)

    @property
    def currency_symbol(self) -> str:
        return CURRENCY_SYMBOLS[self.currency]

    @property
    def album_price(self) -> float:
        return ALBUM_PRICE[self.currency]

    def usd_to_currency(self, amount: float) -> float:
        """Convert a USD amount into the estimator currency"""
        if self.currency == Currency.GBP:
            return amount / GBP_TO_USD
        return amount

    def convert_from_gbp(self, amount: float) -> float:
        """Convert a GBP amount into the estimator currency"""
        if self.currency == Currency.USD:
            return amount * GBP_TO_USD
        return amount

    @property
    def pay_per_stream(self) -> float:
        """Per-stream label payout in the estimator currency"""
        return self.usd_to_currency(PAY_PER_STREAM_USD)

    def stream_estimate(self, plays: int) -> StreamEstimate:
        """Label payout at the average per-stream rate, and the artist share of it"""
        label = self.usd_to_currency(plays * PAY_PER_STREAM_USD)
        return StreamEstimate(plays=plays, label=label, artist=label * ARTIST_SHARE_OF_STREAMING)

    def band_estimate(self, plays: int) -> BandEstimate:
        """Label and artist payouts at the low and high ends of the per-stream band"""
        label_low = self.usd_to_currency(plays * PAY_PER_STREAM_LOW_USD)
        label_high = self.usd_to_currency(plays * PAY_PER_STREAM_HIGH_USD)
        return BandEstimate(
            plays=plays,
            label_low=label_low,
            label_high=label_high,
            artist_low=label_low * ARTIST_SHARE_OF_STREAMING,
            artist_high=label_high * ARTIST_SHARE_OF_STREAMING
        )

    @staticmethod
    def average_listens(valid_listens: int, artist_count: int) -> float:
        """Average listens per artist, 0 when there are no artists"""
        if artist_count <= 0:
            return 0.0
        return valid_listens / artist_count

    def subscription_cost(self, start_year: int, end_year: int, today: Optional[date] = None) -> SubscriptionCost:
        """Subscription cost over [start_year, end_year) in the estimator currency"""
        cost = reconcile_subscription(start_year, end_year, today=today)
        if self.currency == Currency.GBP:
            return cost

        breakdown = [
            YearCharge(
                year=charge.year,
                monthly_price=self.convert_from_gbp(charge.monthly_price) if charge.priced else None,
                months=charge.months,
                yearly_total=self.convert_from_gbp(charge.yearly_total),
                partial=charge.partial
            ) for charge in cost.breakdown
        ]
        periods = [
            PricePeriodTotal(
                start_year=period.start_year,
                end_year=period.end_year,
                monthly_price=self.convert_from_gbp(period.monthly_price) if period.priced else None,
                total=self.convert_from_gbp(period.total)
            ) for period in cost.periods
        ]
        return SubscriptionCost(
            start_year=cost.start_year,
            end_year=cost.end_year,
            total_paid=sum(charge.yearly_total for charge in breakdown),
            breakdown=breakdown,
            periods=periods
        )

    def album_purchase_alternative(self, summary: ListeningSummary,
                                   threshold: Optional[int] = None) -> AlbumPurchaseAlternative:
        """
        Cost of buying every real album played at least `threshold` times
        instead of streaming, and what the artists would have earned from it.
        """
        if threshold is None:
            threshold = DEFAULT_ALBUM_PURCHASE_THRESHOLD

        albums = [
            PurchasedAlbum(
                album_name=album.album_name,
                artist_name=album.artist_name,
                plays=album.album_plays,
                total_track_plays=album.plays
            )
            for album in summary.albums.values()
            if album.is_real_album(REAL_ALBUM_MIN_TRACKS) and album.album_plays >= threshold
        ]
        total_cost = len(albums) * self.album_price
        logger.debug(f"{len(albums)} albums reach the purchase threshold of {threshold}")
        return AlbumPurchaseAlternative(
            threshold=threshold,
            album_count=len(albums),
            total_cost=total_cost,
            artist_earnings=total_cost * ARTIST_SHARE_OF_ALBUM,
            albums=albums
        )

    def purchase_multiple(self, total_track_plays: int) -> Optional[float]:
        """
        How many times more the artist earns from one album purchase than from
        the streams of its tracks. None when the streams earned nothing.
        """
        artist_streaming = self.stream_estimate(total_track_plays).artist
        if artist_streaming <= 0:
            return None
        return (self.album_price * ARTIST_SHARE_OF_ALBUM) / artist_streaming
