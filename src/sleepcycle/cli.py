"""CLI for the sleepcycle analysis engine."""

import logging
from datetime import datetime, timezone

import click


def _secs_to_hm(secs: int) -> str:
    return f"{secs // 3600}:{secs % 3600 // 60:02d}"


def _local_hm(timestamp: int, utc_offset: int) -> str:
    return datetime.fromtimestamp(timestamp + utc_offset, tz=timezone.utc).strftime("%H:%M")


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log analysis details to stderr.")
def main(verbose: bool) -> None:
    """sleepcycle: sleep cycle detection from wearable monitoring data."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command("analyze")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--day", "-d", required=True, type=click.DateTime(formats=["%Y-%m-%d"]),
              help="Local day to analyse (YYYY-MM-DD).")
@click.option("--offset-hours", default=-12.0, show_default=True,
              help="Window start relative to local midnight of DAY.")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON.")
@click.option("--output", "-o", default=None, help="Write result JSON to file.")
@click.option("--dump", default=None, help="Write per-minute analysis CSV to file.")
def analyze_cmd(
    file: str,
    day: datetime,
    offset_hours: float,
    as_json: bool,
    output: str | None,
    dump: str | None,
) -> None:
    """Detect sleep cycles in a JSON-lines monitoring batch file."""
    from sleepcycle.loader import load_batches
    from sleepcycle.analytics.pipeline import analyze_sleep

    batches = load_batches(file)
    analysis = analyze_sleep(
        batches,
        day.date(),
        window_offset_secs=int(offset_hours * 3600),
        dump_path=dump,
    )

    if as_json:
        click.echo(analysis.to_json())
    elif not analysis.cycles:
        click.echo(f"No sleep data available for {analysis.day}")
    else:
        offset = analysis.utc_offset
        gaps = dict(analysis.wake_gaps())

        click.echo(f"\n{'=' * 66}")
        click.echo(f"  Sleep cycles: {analysis.day} ({analysis.strategy.value})")
        click.echo(f"{'=' * 66}")
        click.echo(f"  {'Cycle':>5}  {'From':>5}  {'To':>5}  {'Duration':>8}"
                   f"  {'REM':>5}  {'Light':>5}  {'Deep':>5}")
        for idx, cycle in enumerate(analysis.cycles, 1):
            seconds = cycle.summary()["phase_durations"]
            click.echo(
                f"  {idx:>5}  {_local_hm(cycle.from_time, offset):>5}"
                f"  {_local_hm(cycle.to_time, offset):>5}"
                f"  {_secs_to_hm(cycle.duration):>8}"
                f"  {_secs_to_hm(seconds['rem']):>5}"
                f"  {_secs_to_hm(seconds['nrem1'] + seconds['nrem2']):>5}"
                f"  {_secs_to_hm(seconds['nrem3']):>5}"
            )
            if cycle.to_time in gaps:
                wake_end = gaps[cycle.to_time]
                click.echo(
                    f"  {'Wake':>5}  {_local_hm(cycle.to_time, offset):>5}"
                    f"  {_local_hm(wake_end, offset):>5}"
                    f"  {'(' + _secs_to_hm(wake_end - cycle.to_time) + ')':>8}"
                )
        click.echo(f"{'-' * 66}")
        click.echo(f"  Total sleep: {_secs_to_hm(analysis.total_sleep)}"
                   f"   REM: {_secs_to_hm(analysis.rem_sleep)}"
                   f"   Light: {_secs_to_hm(analysis.light_sleep)}"
                   f"   Deep: {_secs_to_hm(analysis.deep_sleep)}")
        if analysis.resting_heart_rate is not None:
            click.echo(f"  Resting HR:  {analysis.resting_heart_rate} bpm")
        click.echo(f"{'=' * 66}")

    if output:
        with open(output, "w") as f:
            f.write(analysis.to_json())
        click.echo(f"\nResult written to {output}")

    if dump and analysis.window_start_time is not None:
        click.echo(f"Per-minute data written to {dump}")


if __name__ == "__main__":
    main()
