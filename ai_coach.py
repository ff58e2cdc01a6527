"""
AI workout generation
Prompt -> Claude -> normalized workout, with the synthetic fallback whenever
the model is unavailable, over budget or fails.
"""

import random
from typing import Any, Dict, List, Optional, Tuple

from anthropic import Anthropic

from config import get_ai_model, get_anthropic_api_key
from prompt_builder import build_workout_prompt
from usage import calculate_cost, is_over_budget, update_usage
from workout_generator import normalize_preferences
from workout_parser import create_fallback_workout, parse_workout_response

MAX_TOKENS = 1500

_client = None

def get_client():
    """Lazily created Anthropic client, or None when no API key is configured"""
    global _client
    api_key = get_anthropic_api_key()
    if api_key is None:
        return None
    if _client is None:
        _client = Anthropic(api_key=api_key)
    return _client

def request_workout_text(prompt: str, client) -> Tuple[str, Dict[str, Any]]:
    """Send one prompt; returns the reply text and its token usage"""
    message = client.messages.create(
        model=get_ai_model(),
        max_tokens=MAX_TOKENS,
        messages=[{"role": "user", "content": prompt}]
    )
    input_tokens = message.usage.input_tokens
    output_tokens = message.usage.output_tokens
    text = message.content[0].text if message.content else ''
    return text, {
        'input_tokens': input_tokens,
        'output_tokens': output_tokens,
        'cost': calculate_cost(input_tokens, output_tokens),
    }

def generate_ai_workout(preferences: Optional[Dict[str, Any]], workout_history: Optional[List[Dict[str, Any]]] = None,
                        client=None, user_id=None, rng: Optional[random.Random] = None
                        ) -> Tuple[Dict[str, Any], Optional[Dict[str, Any]]]:
    """
    Returns (workout, usage). usage is None whenever the model was not called
    successfully; the workout is then the synthetic fallback.
    """
    prefs = normalize_preferences(preferences)
    client = client if client is not None else get_client()

    if client is None:
        print("⚠ AI generation disabled (no ANTHROPIC_API_KEY), using fallback workout")
        return create_fallback_workout(prefs, rng=rng), None

    if is_over_budget(user_id):
        print("⚠ AI budget exceeded, using fallback workout")
        return create_fallback_workout(prefs, rng=rng), None

    prompt = build_workout_prompt(prefs, workout_history, rng=rng)
    try:
        text, usage = request_workout_text(prompt, client)
    except Exception as e:
        print(f"⚠ AI request failed: {e}")
        return create_fallback_workout(prefs, rng=rng), None

    update_usage(usage['input_tokens'], usage['output_tokens'], user_id)
    print(f"✓ AI workout generated ({usage['input_tokens']} in / {usage['output_tokens']} out)")
    return parse_workout_response(text, prefs), usage
