"""Text report, artist export and report figures"""
from datetime import date
from typing import Optional, Tuple

from unwrapped_stats.aggregator import SERVICE_LAUNCH_YEAR
from unwrapped_stats.estimator import ARTIST_SHARE_OF_STREAMING, Currency, MonetaryEstimator
from unwrapped_stats.models.report import PeriodFigures, RankFigures, ReportFigures, SummaryStats
from unwrapped_stats.models.stats import ListeningSummary
from unwrapped_stats.pricing import reconcile_subscription
from unwrapped_stats.ranking import Podium

RANK_TITLES = ("Most played", "Second most played", "Third most played")

def artist_export(summary: ListeningSummary) -> str:
    """One '<plays>: <name>' line per artist, in first-seen order"""
    return "".join(f"{artist.plays}: {artist.name}\n" for artist in summary.artists.values())

def subscription_range(summary: ListeningSummary, today: Optional[date] = None) -> Tuple[int, int]:
    """Year range [start, end) charged in the report: first to last year seen in the data"""
    today = today or date.today()
    start = summary.earliest_year or SERVICE_LAUNCH_YEAR
    end = summary.latest_year or today.year
    return start, end

def summary_stats(summary: ListeningSummary, top_three: Podium, estimator: MonetaryEstimator,
                  today: Optional[date] = None) -> SummaryStats:
    """Headline figures; the subscription total stays on its GBP basis"""
    start, end = subscription_range(summary, today)
    subscription = reconcile_subscription(start, end, today=today)
    top = estimator.stream_estimate(top_three.first.plays)
    everyone = estimator.stream_estimate(summary.valid_listens)

    return SummaryStats(
        total_listens=summary.total_tracks,
        valid_listens=summary.valid_listens,
        years=subscription.years,
        artist_count=summary.artist_count,
        spotify_total=subscription.total_paid,
        top_artist=top_three.first.name,
        top_artist_plays=top_three.first.plays,
        top_artist_label=top.label,
        top_artist_earnings=top.artist,
        total_artist_earnings=everyone.artist
    )

def build_figures(summary: ListeningSummary, top_three: Podium, estimator: MonetaryEstimator,
                  today: Optional[date] = None) -> ReportFigures:
    valid_listens = summary.valid_listens
    overall = estimator.stream_estimate(valid_listens)

    podium_figures = []
    for rank, entry in enumerate(top_three.ranks(), start=1):
        band = estimator.band_estimate(entry.plays)
        podium_figures.append(RankFigures(
            rank=rank,
            name=entry.name,
            plays=entry.plays,
            label_low=band.label_low,
            label_high=band.label_high,
            artist_low=band.artist_low,
            artist_high=band.artist_high
        ))

    average = estimator.average_listens(valid_listens, summary.artist_count)
    average_band = estimator.band_estimate(1)

    start, end = subscription_range(summary, today)
    subscription = estimator.subscription_cost(start, end, today=today)

    return ReportFigures(
        currency=estimator.currency.value,
        valid_listens=valid_listens,
        pay_per_stream=estimator.pay_per_stream,
        label_estimate=overall.label,
        artist_estimate=overall.artist,
        podium=podium_figures,
        artist_count=summary.artist_count,
        average_listens=average,
        average_label_low=average * average_band.label_low,
        average_label_high=average * average_band.label_high,
        average_artist_low=average * average_band.artist_low,
        average_artist_high=average * average_band.artist_high,
        subscription_start_year=start,
        subscription_end_year=end,
        subscription_years=subscription.years,
        subscription_total=subscription.total_paid,
        subscription_periods=[
            PeriodFigures(
                start_year=period.start_year,
                end_year=period.end_year,
                monthly_price=period.monthly_price,
                total=period.total
            ) for period in subscription.periods
        ],
        unpriced_years=subscription.unpriced_years
    )

def render_text(figures: ReportFigures) -> str:
    """Render report figures as the plain-text summary"""
    sym = MonetaryEstimator(Currency(figures.currency)).currency_symbol
    share = f"{ARTIST_SHARE_OF_STREAMING:.0%}"
    lines = [
        "=== STREAMING REVENUE ===",
        f"Money to labels over {figures.valid_listens} listens:",
        f"  {sym}{figures.pay_per_stream:.4f} per listen: {sym}{figures.label_estimate:.2f}",
        "",
        f"Money to artists ({share} of label revenue):",
        f"  {sym}{figures.artist_estimate:.2f}",
        "",
    ]

    for title, rank in zip(RANK_TITLES, figures.podium):
        lines.append(f"{title} artist at {rank.plays} plays: {rank.name}")
        lines.append(f"  Label earned: {sym}{rank.label_low:.2f} - {sym}{rank.label_high:.2f}")
        lines.append(f"  Artist earned ({share}): {sym}{rank.artist_low:.2f} - {sym}{rank.artist_high:.2f}")
    lines.append("")

    lines.append(f"Average listens across {figures.artist_count} artists: {figures.average_listens:.2f}")
    lines.append(f"  Average label earnings: {sym}{figures.average_label_low:.2f} - {sym}{figures.average_label_high:.2f}")
    lines.append(f"  Average artist earnings ({share}): {sym}{figures.average_artist_low:.2f} - {sym}{figures.average_artist_high:.2f}")
    lines.append("")

    lines.append("=== SPOTIFY SUBSCRIPTION COST (Historical Pricing) ===")
    lines.append(
        f"Period: {figures.subscription_start_year} - {figures.subscription_end_year} "
        f"({figures.subscription_years} years)"
    )
    lines.append(f"Total paid to Spotify: {sym}{figures.subscription_total:.2f}")
    lines.append("")
    lines.append("Breakdown by period:")
    for period in figures.subscription_periods:
        span = f"{period.start_year}-{period.end_year}"
        if period.monthly_price is None:
            lines.append(f"{span}: no price on record")
        else:
            lines.append(f"{span}: {sym}{period.monthly_price:.2f}/month = {sym}{period.total:.2f}")

    return "\n".join(lines) + "\n"
