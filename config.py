"""
Configuration for Workout AI Tracker
Reads settings from the environment (and .env via python-dotenv)
"""

import os
from dotenv import load_dotenv

load_dotenv()

DEFAULT_AI_MODEL = "claude-3-haiku-20240307"

# Claude 3 Haiku pricing (per 1M tokens)
INPUT_COST_PER_MILLION = 0.25
OUTPUT_COST_PER_MILLION = 1.25

def is_placeholder(value):
    """True for missing, blank or template values like 'your_api_key_here'"""
    if value is None:
        return True
    value = str(value).strip()
    return value == '' or 'your_' in value.lower()

def get_anthropic_api_key():
    """API key for the generative model, or None when not configured"""
    key = os.getenv("ANTHROPIC_API_KEY")
    if is_placeholder(key):
        return None
    return key.strip()

def is_ai_enabled():
    """AI generation is only attempted when a real API key is present"""
    return get_anthropic_api_key() is not None

def get_ai_model():
    return os.getenv("ANTHROPIC_MODEL") or DEFAULT_AI_MODEL

def _get_float(name, default):
    try:
        return float(os.getenv(name, default))
    except (TypeError, ValueError):
        return float(default)

def get_daily_budget():
    return _get_float("DAILY_BUDGET", "1.00")  # $1/day default

def get_monthly_budget():
    return _get_float("MONTHLY_BUDGET", "20.00")  # $20/month default

def run_evals_enabled():
    return os.getenv("RUN_EVALS", "false").lower() == "true"

def is_production_env():
    """Production is detected from a Postgres DATABASE_URL, Railway vars or an explicit SECRET_KEY"""
    return (
        'postgres' in os.getenv('DATABASE_URL', '').lower()
        or os.getenv('RAILWAY_ENVIRONMENT') is not None
        or os.getenv('RAILWAY') is not None
        or os.getenv('SECRET_KEY') is not None
    )
