"""Report figure models"""
from typing import List, Optional
from pydantic import BaseModel, Field

class SummaryStats(BaseModel):
    """Headline figures of a processing pass"""
    total_listens: int = Field(description="All ingested records")
    valid_listens: int = Field(description="Records attributed to an artist")
    years: int = Field(description="Years covered by the subscription estimate")
    artist_count: int = Field(description="Distinct artists")
    spotify_total: float = Field(description="Subscription cost paid, GBP basis")
    top_artist: str = Field(description="Most played artist")
    top_artist_plays: int
    top_artist_label: float = Field(description="Label earnings from the top artist's streams")
    top_artist_earnings: float = Field(description="Artist share of the top artist's streams")
    total_artist_earnings: float = Field(description="Artist share across all valid listens")

class RankFigures(BaseModel):
    """Low/high payout band for one ranked artist"""
    rank: int
    name: str
    plays: int
    label_low: float
    label_high: float
    artist_low: float
    artist_high: float

class PeriodFigures(BaseModel):
    start_year: int
    end_year: int
    monthly_price: Optional[float] = Field(description="None when no price is on record")
    total: float

class ReportFigures(BaseModel):
    """
    Every figure in the text report, in the report currency.

    The label and artist estimates use the average per-stream rate; podium
    and average figures use the low/high per-stream band.
    """
    currency: str
    valid_listens: int
    pay_per_stream: float
    label_estimate: float
    artist_estimate: float
    podium: List[RankFigures] = []
    artist_count: int
    average_listens: float
    average_label_low: float
    average_label_high: float
    average_artist_low: float
    average_artist_high: float
    subscription_start_year: int
    subscription_end_year: int
    subscription_years: int
    subscription_total: float
    subscription_periods: List[PeriodFigures] = []
    unpriced_years: List[int] = []
