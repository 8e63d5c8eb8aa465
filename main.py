#!/usr/bin/env python3
"""
Fantasy Draft Engine - CLI Interface
"""
import click
from core.database import DatabaseManager
from core.logging_config import setup_logging
from core.player_pool import PlayerPool
from draft.engine import DraftEngine
from draft.errors import DraftError


def _parse_participants(ctx, param, values):
    """PARTICIPANT or PARTICIPANT:USER, in draft order"""
    participants = []
    for value in values:
        participant_id, _, user_id = value.partition(':')
        if not participant_id:
            raise click.BadParameter(f"Invalid participant: {value!r}")
        participants.append({'participant_id': participant_id, 'user_id': user_id or None})
    return participants


def _parse_quotas(ctx, param, values):
    """REGION=CAP pairs"""
    quotas = {}
    for value in values:
        region, sep, cap = value.partition('=')
        if not sep or not region:
            raise click.BadParameter(f"Expected REGION=CAP, got {value!r}")
        try:
            quotas[region] = int(cap)
        except ValueError:
            raise click.BadParameter(f"Cap for {region} must be an integer, got {cap!r}")
    return quotas


def _fail(ctx, message: str):
    click.echo(f"❌ {message}", err=True)
    ctx.exit(1)


@click.group()
@click.option('--db-path', envvar='DRAFT_DATABASE_PATH', help='SQLite database file')
@click.option('--log-level', default=None, help='Logging level (DEBUG, INFO, WARNING)')
@click.pass_context
def cli(ctx, db_path, log_level):
    """Fantasy Draft Engine"""
    setup_logging(log_level)
    ctx.ensure_object(dict)
    ctx.obj['db'] = DatabaseManager(db_path)
    ctx.obj['player_pool'] = PlayerPool(ctx.obj['db'])
    ctx.obj['draft_engine'] = DraftEngine(ctx.obj['db'], ctx.obj['player_pool'])

@cli.group()
def players():
    """Player pool commands"""
    pass

@players.command('import')
@click.option('--file', 'file_path', required=True, type=click.Path(exists=True), help='CSV/JSON file path')
@click.option('--format', 'file_format', default='csv', help='File format (csv/json)')
@click.pass_context
def import_players(ctx, file_path, file_format):
    """Import players (player_id, name, region) into the pool"""
    try:
        count = ctx.obj['player_pool'].import_from_file(file_path, file_format)
    except ValueError as e:
        _fail(ctx, f"Error importing players: {e}")
    click.echo(f"✅ Imported {count} players")

@players.command('list')
@click.option('--region', help='Filter by region (EU, NAW, BR, ...)')
@click.pass_context
def list_players(ctx, region):
    """Show the player pool"""
    pool = ctx.obj['player_pool'].get_players(region)
    if not pool:
        click.echo("No players found")
        return

    click.echo(f"{'ID':<20} {'Name':<25} {'Region':<6}")
    click.echo("─" * 53)
    for player in pool:
        click.echo(f"{player.player_id:<20} {player.name:<25} {player.region or '-':<6}")

@cli.group()
def draft():
    """Draft management commands"""
    pass

@draft.command()
@click.option('--game-id', required=True, help='Game the draft belongs to')
@click.option('--participant', 'participants', multiple=True, required=True, callback=_parse_participants,
              help='PARTICIPANT[:USER], repeated in draft order')
@click.option('--quota', 'quotas', multiple=True, callback=_parse_quotas, help='REGION=CAP, repeatable')
@click.option('--creator', help='User id allowed to manage the draft')
@click.option('--players-per-team', type=int, help='Rounds when no quotas are given')
@click.option('--linear', is_flag=True, help='Same order every round instead of snake')
@click.pass_context
def create(ctx, game_id, participants, quotas, creator, players_per_team, linear):
    """Create a new draft"""
    try:
        new_draft = ctx.obj['draft_engine'].create_draft(
            game_id, participants, region_quotas=quotas or None, creator_id=creator,
            players_per_team=players_per_team, snake_enabled=False if linear else None
        )
    except DraftError as e:
        _fail(ctx, f"Error creating draft: {e.message}")

    click.echo(f"✅ Draft created! Draft ID: {new_draft.draft_id}")
    click.echo(f"Participants: {new_draft.participant_count}, Rounds: {new_draft.total_rounds}, "
               f"{'Snake' if new_draft.snake_enabled else 'Linear'} order")
    if new_draft.region_quotas:
        quota_str = ', '.join(f"{region}={cap}" for region, cap in sorted(new_draft.region_quotas.items()))
        click.echo(f"Region quotas: {quota_str}")

def _run_transition(ctx, method_name: str, draft_id: str, user_id: str, verb: str):
    try:
        updated = getattr(ctx.obj['draft_engine'], method_name)(draft_id, user_id)
    except DraftError as e:
        _fail(ctx, f"Error: {e.message}")
    click.echo(f"✅ Draft {verb} ({updated.status.value})")

@draft.command()
@click.option('--draft-id', required=True, help='Draft ID')
@click.option('--user-id', help='Acting user (checked against the creator)')
@click.pass_context
def start(ctx, draft_id, user_id):
    """Open the draft for picks"""
    _run_transition(ctx, 'start_draft', draft_id, user_id, 'started')

@draft.command()
@click.option('--draft-id', required=True, help='Draft ID')
@click.option('--user-id', help='Acting user (checked against the creator)')
@click.pass_context
def pause(ctx, draft_id, user_id):
    """Pause an active draft"""
    _run_transition(ctx, 'pause_draft', draft_id, user_id, 'paused')

@draft.command()
@click.option('--draft-id', required=True, help='Draft ID')
@click.option('--user-id', help='Acting user (checked against the creator)')
@click.pass_context
def resume(ctx, draft_id, user_id):
    """Resume a paused draft"""
    _run_transition(ctx, 'resume_draft', draft_id, user_id, 'resumed')

@draft.command()
@click.option('--draft-id', required=True, help='Draft ID')
@click.option('--user-id', help='Acting user (checked against the creator)')
@click.pass_context
def finish(ctx, draft_id, user_id):
    """Finish a draft once every pick is made"""
    _run_transition(ctx, 'finish_draft', draft_id, user_id, 'finished')

@draft.command()
@click.option('--draft-id', required=True, help='Draft ID')
@click.option('--user-id', help='Acting user (checked against the creator)')
@click.pass_context
def cancel(ctx, draft_id, user_id):
    """Cancel a draft that hasn't finished"""
    _run_transition(ctx, 'cancel_draft', draft_id, user_id, 'cancelled')

@draft.command()
@click.option('--draft-id', required=True, help='Draft ID')
@click.option('--participant-id', required=True, help='Participant making the pick')
@click.option('--player-id', required=True, help='Player to select')
@click.option('--auto', 'auto_pick', is_flag=True, help='Record as an automatic pick')
@click.pass_context
def pick(ctx, draft_id, participant_id, player_id, auto_pick):
    """Select a player for the participant on the clock"""
    result = ctx.obj['draft_engine'].select_player(draft_id, participant_id, player_id, auto_pick)
    if not result.ok:
        _fail(ctx, f"Pick rejected ({result.error.code}): {result.error.message}")

    made = result.pick
    click.echo(f"✅ R{made.round}P{made.pick_number}: {participant_id} drafted {player_id}")
    if result.draft_complete:
        click.echo("🎉 All picks are in! Run 'draft finish' to close the draft")

@draft.command()
@click.option('--draft-id', required=True, help='Draft ID')
@click.pass_context
def status(ctx, draft_id):
    """Show draft progress and who is on the clock"""
    try:
        summary = ctx.obj['draft_engine'].get_draft_summary(draft_id)
    except DraftError as e:
        _fail(ctx, f"Error: {e.message}")

    click.echo(f"\n📋 Draft {summary['draft_id']} (game {summary['game_id']})")
    click.echo(f"Status: {summary['status']}")
    click.echo(f"Picks: {summary['picks_made']}/{summary['total_picks']} "
               f"({summary['remaining_picks']} remaining)")
    if summary['is_complete']:
        click.echo("All picks made")
    else:
        picker = summary['current_picker']
        click.echo(f"🏈 Round {summary['current_round']}, Pick {summary['current_pick']}")
        if picker:
            click.echo(f"👥 On the clock: {picker['participant_id']} (draft order {picker['draft_order']})")
        if summary['pick_timeout_seconds']:
            click.echo(f"⏱️  Pick clock: {summary['pick_timeout_seconds']}s")

@draft.command()
@click.option('--draft-id', required=True, help='Draft ID')
@click.pass_context
def history(ctx, draft_id):
    """Show picks in (round, pick) order"""
    try:
        picks = ctx.obj['draft_engine'].get_pick_history(draft_id)
        participant_count = ctx.obj['draft_engine'].get_draft(draft_id).participant_count
    except DraftError as e:
        _fail(ctx, f"Error: {e.message}")

    if not picks:
        click.echo("No picks yet")
        return

    click.echo(f"{'Pick':<8} {'#':<4} {'Participant':<20} {'Player':<20} {'Region':<6} {'Secs':<5}")
    click.echo("─" * 68)
    for made in picks:
        secs = made.time_taken_seconds if made.time_taken_seconds is not None else '-'
        auto = ' (auto)' if made.auto_pick else ''
        click.echo(f"R{made.round}P{made.pick_number:<5} {made.overall_number(participant_count):<4} "
                   f"{made.participant_id:<20} "
                   f"{made.player_id:<20} {made.region or '-':<6} {secs!s:<5}{auto}")

@draft.command()
@click.option('--draft-id', required=True, help='Draft ID')
@click.pass_context
def order(ctx, draft_id):
    """Show the draft order"""
    try:
        participants = ctx.obj['draft_engine'].get_draft_order(draft_id)
    except DraftError as e:
        _fail(ctx, f"Error: {e.message}")

    for participant in participants:
        creator = ' ⭐' if participant.is_creator else ''
        click.echo(f"{participant.draft_order:>2}. {participant.participant_id}{creator}")

@draft.command()
@click.option('--draft-id', required=True, help='Draft ID')
@click.option('--region', help='Filter by region')
@click.option('--limit', default=20, help='Number of players to show')
@click.pass_context
def available(ctx, draft_id, region, limit):
    """Show players not yet drafted"""
    try:
        pool = ctx.obj['draft_engine'].get_available_players(draft_id, region, limit)
    except DraftError as e:
        _fail(ctx, f"Error: {e.message}")

    pos_str = f" {region.upper()}" if region else ""
    click.echo(f"\n📋 Available{pos_str} Players:")
    for player in pool:
        click.echo(f"  {player['player_id']:<20} {player['name']:<25} {player.get('region') or '-'}")

@draft.command('list')
@click.option('--status', 'status_filter', help='Only drafts in this status')
@click.pass_context
def list_drafts(ctx, status_filter):
    """List all drafts"""
    try:
        drafts = ctx.obj['draft_engine'].list_drafts(status_filter)
    except DraftError as e:
        _fail(ctx, f"Error: {e.message}")

    if not drafts:
        click.echo("No drafts found")
        return

    click.echo(f"\n📋 Drafts")
    click.echo(f"{'ID':<38} {'Game':<15} {'Status':<10} {'Position':<9} {'Rounds':<6}")
    click.echo("─" * 82)
    for item in drafts:
        position = f"R{item.current_round}P{item.current_pick}"
        click.echo(f"{item.draft_id:<38} {item.game_id:<15} {item.status.value:<10} "
                   f"{position:<9} {item.total_rounds:<6}")

@cli.command('status')
@click.pass_context
def system_status(ctx):
    """Check system status"""
    click.echo("🔍 System Status Check\n")

    tables = ['players', 'drafts', 'draft_participants', 'draft_picks']
    click.echo("📊 Database Tables:")
    for table in tables:
        result = ctx.obj['db'].execute_query(f"SELECT COUNT(*) as count FROM {table}")
        count = result[0]['count'] if result else 0
        click.echo(f"  {table:<20}: {count:>6} records")

    regions = ctx.obj['player_pool'].region_counts()
    if regions:
        click.echo("\n🌍 Players by region:")
        for region, count in sorted(regions.items()):
            click.echo(f"  {region:<8}: {count:>6}")

    click.echo(f"\n✅ System check complete")

if __name__ == '__main__':
    cli()
