"""Tests for the revenue / team-count roll-up."""
from fest.models.team import STATUS_PENDING, STATUS_REJECTED
from fest.models.user import ROLE_ADMIN, ROLE_DEVELOPER
from fest.services.budget import approved_team_counts, budget_for_scope
from fest.services.identity import Caller


async def test_revenue_rolls_up(session, factory):
    developer = await factory.user(ROLE_DEVELOPER)
    assoc = await factory.association()
    event = await factory.event(assoc)
    game = await factory.game(event)
    c100 = await factory.category(game, entry_fee=100, name="Singles")
    c250 = await factory.category(game, entry_fee=250, name="Doubles")
    for i in range(3):
        await factory.team(c100, name=f"T{i}")
    await factory.team(c100, name="Waiting", status=STATUS_PENDING)
    await factory.team(c250, name="Refused", status=STATUS_REJECTED)
    await session.commit()

    budgets = await budget_for_scope(session, Caller(developer.id, ROLE_DEVELOPER))

    assert len(budgets) == 1
    eb = budgets[0]
    categories = eb.games[0].categories
    assert [(c.name, c.approved_teams_count, c.revenue) for c in categories] == [
        ("Singles", 3, 300),
        ("Doubles", 0, 0),
    ]
    assert eb.games[0].revenue == 300
    assert eb.games[0].total_teams == 3
    assert eb.total_revenue == 300
    assert eb.total_teams == 3


async def test_partial_hierarchy_appears_with_zero_totals(session, factory):
    developer = await factory.user(ROLE_DEVELOPER)
    assoc = await factory.association()
    bare_event = await factory.event(assoc, name="No games yet")
    event = await factory.event(assoc, name="Has an empty game")
    await factory.game(event, name="Chess")
    await session.commit()

    budgets = await budget_for_scope(session, Caller(developer.id, ROLE_DEVELOPER))

    by_name = {b.name: b for b in budgets}
    assert by_name["No games yet"].games == []
    assert by_name["No games yet"].total_revenue == 0
    chess = by_name["Has an empty game"].games[0]
    assert chess.categories == []
    assert chess.revenue == 0
    assert chess.total_teams == 0
    assert bare_event.id in {b.id for b in budgets}


async def test_admin_sees_only_own_events(session, factory):
    admin = await factory.user(ROLE_ADMIN)
    other_admin = await factory.user(ROLE_ADMIN)
    assoc = await factory.association()
    mine = await factory.event(assoc, admin=admin, name="Mine")
    theirs = await factory.event(assoc, admin=other_admin, name="Theirs")
    category = await factory.category(await factory.game(theirs), entry_fee=500)
    await factory.team(category)
    await session.commit()

    budgets = await budget_for_scope(session, Caller(admin.id, ROLE_ADMIN))

    assert [b.id for b in budgets] == [mine.id]


async def test_event_filter_is_intersected_with_scope(session, factory):
    admin = await factory.user(ROLE_ADMIN)
    developer = await factory.user(ROLE_DEVELOPER)
    assoc = await factory.association()
    e1 = await factory.event(assoc, admin=admin, name="One")
    e2 = await factory.event(assoc, admin=admin, name="Two")
    foreign = await factory.event(assoc, name="Foreign")
    await session.commit()

    dev_view = await budget_for_scope(session, Caller(developer.id, ROLE_DEVELOPER), [e2.id, foreign.id])
    admin_view = await budget_for_scope(session, Caller(admin.id, ROLE_ADMIN), [e2.id, foreign.id])

    assert [b.id for b in dev_view] == [e2.id, foreign.id]
    assert [b.id for b in admin_view] == [e2.id]
    assert await budget_for_scope(session, Caller(admin.id, ROLE_ADMIN), []) == []
    assert e1.id not in {b.id for b in admin_view}


async def test_empty_scope_returns_empty_list(session, factory):
    admin = await factory.user(ROLE_ADMIN)
    await session.commit()

    assert await budget_for_scope(session, Caller(admin.id, ROLE_ADMIN)) == []


async def test_approved_team_counts_skips_empty_input(session):
    assert await approved_team_counts(session, []) == {}
