import json
from types import SimpleNamespace

import ai_coach
from ai_coach import generate_ai_workout, request_workout_text
from usage import load_usage

STRUCTURED_REPLY = json.dumps({
    'name': 'Engine Builder',
    'strength': {'exercises': [{'name': 'Front Squat', 'sets': 5, 'reps': '3'}]},
    'wod': {'workoutType': 'AMRAP', 'exercises': [{'name': 'Burpees', 'reps': '10'},
                                                  {'name': 'Plank', 'reps': '30 seconds', 'category': 'core'}]},
})

class FakeMessages:
    def __init__(self, text='', error=None):
        self.text = text
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return SimpleNamespace(
            content=[SimpleNamespace(text=self.text)],
            usage=SimpleNamespace(input_tokens=1000, output_tokens=400),
        )

class FakeClient:
    def __init__(self, text='', error=None):
        self.messages = FakeMessages(text, error)

def test_no_api_key_means_no_client(monkeypatch):
    monkeypatch.setenv('ANTHROPIC_API_KEY', 'your_api_key_here')
    monkeypatch.setattr(ai_coach, '_client', None)
    assert ai_coach.get_client() is None

def test_disabled_ai_returns_fallback(db):
    workout, usage = generate_ai_workout({'focusArea': 'core'}, [])
    assert workout['type'] == 'ai-generated-fallback'
    assert usage is None

def test_model_reply_is_normalized_and_usage_recorded(db):
    client = FakeClient(STRUCTURED_REPLY)
    workout, usage = generate_ai_workout({'focusArea': 'full body'}, [], client=client)
    assert workout['type'] == 'ai-generated'
    assert workout['name'] == 'Engine Builder'
    assert usage['input_tokens'] == 1000
    assert usage['cost'] > 0
    call = client.messages.calls[0]
    assert call['model'] == 'claude-3-haiku-20240307'
    assert 'CrossFit' in call['messages'][0]['content']
    assert load_usage()['total']['input_tokens'] == 1000

def test_model_error_returns_fallback(db):
    client = FakeClient(error=RuntimeError('overloaded'))
    workout, usage = generate_ai_workout({'focusArea': 'upper body'}, [], client=client)
    assert workout['type'] == 'ai-generated-fallback'
    assert usage is None

def test_over_budget_skips_the_model(db, monkeypatch):
    monkeypatch.setenv('DAILY_BUDGET', '0')
    client = FakeClient(STRUCTURED_REPLY)
    workout, usage = generate_ai_workout({}, [], client=client)
    assert workout['type'] == 'ai-generated-fallback'
    assert client.messages.calls == []

def test_request_workout_text_uses_configured_model(monkeypatch):
    monkeypatch.setenv('ANTHROPIC_MODEL', 'claude-test-model')
    client = FakeClient('hello')
    text, usage = request_workout_text('prompt', client)
    assert text == 'hello'
    assert usage['output_tokens'] == 400
    assert client.messages.calls[0]['model'] == 'claude-test-model'
