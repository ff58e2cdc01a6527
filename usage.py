"""
AI usage tracking and budget checks
Token counts and cost per user per day live in the usage table.
"""

import traceback
from datetime import datetime, timedelta

from config import INPUT_COST_PER_MILLION, OUTPUT_COST_PER_MILLION, get_daily_budget, get_monthly_budget
from database import adapt_query, get_cursor, get_db_connection, is_sqlite

def _empty_usage():
    return {"daily": {}, "total": {"input_tokens": 0, "output_tokens": 0, "cost": 0.0}}

def calculate_cost(input_tokens, output_tokens):
    """Calculate cost in dollars"""
    input_cost = (input_tokens / 1_000_000) * INPUT_COST_PER_MILLION
    output_cost = (output_tokens / 1_000_000) * OUTPUT_COST_PER_MILLION
    return input_cost + output_cost

def load_usage(user_id=None):
    """Usage per day plus totals; all users when user_id is None"""
    query = """
        SELECT date, input_tokens, output_tokens, cost, requests
        FROM usage
    """
    params = ()
    if user_id is not None:
        query += " WHERE user_id = ?"
        params = (int(user_id),)
    query += " ORDER BY date DESC"

    try:
        with get_db_connection() as conn:
            cur = get_cursor(conn)
            cur.execute(adapt_query(query), params)
            rows = cur.fetchall()
    except Exception as e:
        print(f"Error loading usage from database: {e}")
        traceback.print_exc()
        return _empty_usage()

    usage = _empty_usage()
    for row in rows:
        date_str = row[0].strftime("%Y-%m-%d") if hasattr(row[0], 'strftime') else str(row[0])
        day = usage["daily"].setdefault(date_str, {"input_tokens": 0, "output_tokens": 0, "cost": 0.0, "requests": 0})
        day["input_tokens"] += row[1]
        day["output_tokens"] += row[2]
        day["cost"] += float(row[3])
        day["requests"] += row[4]
        usage["total"]["input_tokens"] += row[1]
        usage["total"]["output_tokens"] += row[2]
        usage["total"]["cost"] += float(row[3])
    return usage

def update_usage(input_tokens, output_tokens, user_id=None):
    """Add one model request to today's row for the user"""
    today = datetime.now().strftime("%Y-%m-%d")
    cost = calculate_cost(input_tokens, output_tokens)

    try:
        with get_db_connection() as conn:
            cur = get_cursor(conn)
            if is_sqlite():
                cur.execute("""
                    SELECT id FROM usage WHERE user_id IS ? AND date = ?
                """, (user_id, today))
                existing = cur.fetchone()
                if existing:
                    cur.execute("""
                        UPDATE usage
                        SET input_tokens = input_tokens + ?,
                            output_tokens = output_tokens + ?,
                            cost = cost + ?,
                            requests = requests + 1,
                            updated_at = CURRENT_TIMESTAMP
                        WHERE id = ?
                    """, (input_tokens, output_tokens, cost, existing[0]))
                else:
                    cur.execute("""
                        INSERT INTO usage (date, input_tokens, output_tokens, cost, requests, user_id)
                        VALUES (?, ?, ?, ?, 1, ?)
                    """, (today, input_tokens, output_tokens, cost, user_id))
            else:
                cur.execute("""
                    INSERT INTO usage (date, input_tokens, output_tokens, cost, requests, user_id)
                    VALUES (%s, %s, %s, %s, 1, %s)
                    ON CONFLICT (user_id, date)
                    DO UPDATE SET
                        input_tokens = usage.input_tokens + %s,
                        output_tokens = usage.output_tokens + %s,
                        cost = usage.cost + %s,
                        requests = usage.requests + 1,
                        updated_at = CURRENT_TIMESTAMP
                """, (today, input_tokens, output_tokens, cost, user_id, input_tokens, output_tokens, cost))
    except Exception as e:
        print(f"Error updating usage in database: {e}")
        traceback.print_exc()
    return cost

def check_budget(user_id=None):
    """Check if we're within budget"""
    usage = load_usage(user_id)
    today = datetime.now().strftime("%Y-%m-%d")
    month_start = (datetime.now() - timedelta(days=30)).strftime("%Y-%m-%d")
    daily_budget = get_daily_budget()
    monthly_budget = get_monthly_budget()

    daily_cost = usage["daily"].get(today, {}).get("cost", 0.0)
    # Rough monthly estimate: last 30 days
    monthly_cost = sum(day["cost"] for date, day in usage["daily"].items() if date >= month_start)

    return {
        "daily_cost": daily_cost,
        "monthly_cost": monthly_cost,
        "total_cost": usage["total"]["cost"],
        "daily_budget": daily_budget,
        "monthly_budget": monthly_budget,
        "daily_remaining": max(0, daily_budget - daily_cost),
        "monthly_remaining": max(0, monthly_budget - monthly_cost),
        "over_daily_budget": daily_cost >= daily_budget,
        "over_monthly_budget": monthly_cost >= monthly_budget
    }

def is_over_budget(user_id=None):
    budget = check_budget(user_id)
    return budget["over_daily_budget"] or budget["over_monthly_budget"]
