import logging
import time
from concurrent.futures import wait
from dataclasses import replace

import click

from mathsprint.errors import MathSprintError
from mathsprint.game import GameMode
from .session import CLASSIC_RULES, RAMP_RULES, GameSession, SessionState, format_time
from .stores import DEFAULT_SERVER_URL, HttpScoreStore, LocalScoreStore

MODE_CHOICES = [m.value for m in GameMode.fixed_modes()]


def _make_store(server, local_path):
    if local_path:
        return LocalScoreStore(local_path)
    return HttpScoreStore(server)


def _print_leaderboard(records):
    if not records:
        click.echo('No scores yet. Be the first!')
        return
    for position, record in enumerate(records, start=1):
        click.echo(f'{position:>2}. {record.player_name:<20} {record.score:>5}  ({record.game_mode})')


@click.group()
@click.option('-v', '--verbose', is_flag=True, help='Log store traffic and timer events.')
def cli(verbose):
    """Math Sprint: timed addition practice with a shared leaderboard."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)


@cli.command()
@click.option('--name', prompt='Enter your name', help='Name shown on the leaderboard.')
@click.option('--mode', type=click.Choice(MODE_CHOICES), default=None, help='Skip the mode prompt.')
@click.option('--ramp', is_flag=True, help='Single mode that gets harder as you score.')
@click.option('--server', default=DEFAULT_SERVER_URL, envvar='MATHSPRINT_SERVER_URL', show_default=True)
@click.option('--local', 'local_path', type=click.Path(dir_okay=False), envvar='MATHSPRINT_LOCAL_LEADERBOARD',
              help='Keep scores in this JSON file instead of the server (always ramp mode).')
@click.option('--duration', type=click.IntRange(min=1), default=CLASSIC_RULES.duration_sec, show_default=True)
def play(name, mode, ramp, server, local_path, duration):
    """Play one timed round."""
    rules = RAMP_RULES if (ramp or local_path) else CLASSIC_RULES
    rules = replace(rules, duration_sec=duration)
    session = GameSession(_make_store(server, local_path), rules=rules)
    try:
        try:
            session.begin(name)
        except MathSprintError as exc:
            raise click.BadParameter(exc.message, param_hint='--name')

        if session.state is SessionState.MODE_SELECTION:
            if mode is None:
                for m in GameMode.fixed_modes():
                    click.echo(f'  {m.value:<7} {m.display_name}: {m.description}')
                mode = click.prompt('Pick a game', type=click.Choice(MODE_CHOICES), default=MODE_CHOICES[0])
            session.select_mode(mode)

        _play_loop(session)
        _show_results(session)
    finally:
        session.close()


def _play_loop(session):
    delay = session.rules.feedback_delay_sec
    while session.state is SessionState.PLAYING:
        problem = session.current_problem
        answer = click.prompt(
            f'[{format_time(session.time_remaining)}] score {session.score} | {problem} =',
            default='', show_default=False,
        )
        if session.state is not SessionState.PLAYING:
            click.echo("Time's up!")
            break
        feedback = session.submit_answer(answer)
        if feedback is None:
            continue
        click.echo(f'  {feedback.message}')
        if session.awaiting_advance:
            # the session swaps in the next problem when its feedback timer fires
            deadline = time.monotonic() + delay + 1
            while session.awaiting_advance and time.monotonic() < deadline:
                time.sleep(0.05)


def _show_results(session):
    click.echo(f'\nGame over, {session.player_name}! Final score: {session.score}')
    if session.submission is not None:
        wait([session.submission], timeout=5)
        wait(session.refresh_results(), timeout=5)
    if session.is_new_high_score:
        click.echo('New personal best!')
    click.echo(f'Personal best: {session.personal_best}')
    click.echo('\nLeaderboard')
    _print_leaderboard(session.leaderboard)


@cli.command()
@click.option('--mode', type=click.Choice([m.value for m in GameMode]), default=None)
@click.option('--server', default=DEFAULT_SERVER_URL, envvar='MATHSPRINT_SERVER_URL', show_default=True)
@click.option('--local', 'local_path', type=click.Path(dir_okay=False), envvar='MATHSPRINT_LOCAL_LEADERBOARD')
def leaderboard(mode, server, local_path):
    """Show the top scores."""
    store = _make_store(server, local_path)
    try:
        records = store.get_leaderboard(mode)
    except MathSprintError as exc:
        raise click.ClickException(exc.message)
    _print_leaderboard(records)


@cli.command('best-score')
@click.argument('player_name')
@click.argument('mode', type=click.Choice([m.value for m in GameMode]))
@click.option('--server', default=DEFAULT_SERVER_URL, envvar='MATHSPRINT_SERVER_URL', show_default=True)
@click.option('--local', 'local_path', type=click.Path(dir_okay=False), envvar='MATHSPRINT_LOCAL_LEADERBOARD')
def best_score(player_name, mode, server, local_path):
    """Show a player's best score."""
    store = _make_store(server, local_path)
    try:
        best = store.get_player_best_score(player_name, mode)
    except MathSprintError as exc:
        raise click.ClickException(exc.message)
    click.echo(best)


if __name__ == '__main__':
    cli()
