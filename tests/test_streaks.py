from app.services.streaks import compute_streaks, get_streak, recalculate_streak


def test_no_completions():
    assert compute_streaks([]) == (0, 0, None)


def test_single_day():
    assert compute_streaks(["2026-03-01"]) == (1, 1, "2026-03-01")


def test_consecutive_days():
    assert compute_streaks(["2026-03-01", "2026-03-02", "2026-03-03"]) == (3, 3, "2026-03-03")


def test_gap_resets_current_but_keeps_longest():
    keys = ["2026-03-01", "2026-03-02", "2026-03-03", "2026-03-05"]
    assert compute_streaks(keys) == (1, 3, "2026-03-05")


def test_order_and_duplicates_do_not_matter():
    keys = ["2026-03-03", "2026-03-01", "2026-03-02", "2026-03-02"]
    assert compute_streaks(keys) == (3, 3, "2026-03-03")


def test_run_across_month_boundary():
    assert compute_streaks(["2026-02-27", "2026-02-28", "2026-03-01"]) == (3, 3, "2026-03-01")


async def test_unknown_user_has_no_streak(db):
    assert await get_streak(db, "nobody") is None


async def test_recalculate_without_best_attempts_stores_zero(db):
    streak = await recalculate_streak(db, "u1")
    await db.commit()
    assert (streak.current_streak, streak.longest_streak, streak.last_completed_date_key) == (0, 0, None)
    assert (await get_streak(db, "u1")).current_streak == 0
