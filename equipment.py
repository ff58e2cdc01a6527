"""
Equipment filtering and prioritization for exercise lists
"""

from typing import Any, Dict, Iterable, List

from exercise_catalog import required_equipment

def filter_by_equipment(exercises: Iterable[Dict[str, Any]], available_equipment: Iterable[str]) -> List[Dict[str, Any]]:
    """Keep exercises that need no equipment or only equipment the user owns"""
    owned = set(available_equipment or [])
    return [ex for ex in exercises if set(required_equipment(ex['name'])) <= owned]

def prioritize_by_equipment(exercises: Iterable[Dict[str, Any]], available_equipment: Iterable[str]) -> List[Dict[str, Any]]:
    """
    Reorder exercises so the ones using more of the user's equipment come first.
    Equal usage puts equipment exercises ahead of bodyweight; sorted() is stable,
    so remaining ties keep their input order.
    """
    owned = set(available_equipment or [])

    def sort_key(exercise):
        required = required_equipment(exercise['name'])
        owned_count = sum(1 for tag in required if tag in owned)
        return (-owned_count, 0 if required else 1)

    return sorted(exercises, key=sort_key)

# Keyword rules for the free-text exercise names used by the AI fallback:
# (keyword, required tag, tags that make an alternative possible, always allowed)
FALLBACK_EQUIPMENT_RULES = (
    ('barbell', 'barbell', ('dumbbells',), False),
    ('dumbbell', 'dumbbells', (), False),
    ('bench', 'bench', (), True),            # floor press works
    ('pull-up', 'pullup_bar', ('resistance_bands',), False),
    ('box jump', 'box_platform', (), True),  # becomes step-ups or broad jumps
    ('rowing', 'rowing_machine', ('treadmill', 'bike'), False),
    ('running', 'treadmill', (), True),      # outdoors
    ('wall ball', 'medicine_balls', (), True),
    ('kettlebell', 'kettlebells', ('dumbbells',), False),
    ('resistance band', 'resistance_bands', (), False),
    ('lat pulldown', 'lat_pulldown', ('dumbbells',), False),
    ('leg press', 'leg_press', (), True),
    ('cable', 'cable_machine', ('dumbbells',), False),
    ('smith', 'smith_machine', ('barbell', 'dumbbells'), False),
    ('dip', 'dip_bars', (), True),
    ('bike', 'bike', (), True),
)

def is_fallback_exercise_available(name: str, available_equipment: Iterable[str], movement_type: str = '') -> bool:
    """Permissive check: an exercise is kept if the user owns its gear or a workable substitute"""
    owned = {tag.lower() for tag in (available_equipment or [])}
    # "Back Squats" of movement type "barbell" must match the barbell rule too
    text = f"{name} {movement_type}".lower()
    for keyword, required, alternatives, always_allowed in FALLBACK_EQUIPMENT_RULES:
        if keyword not in text or required in owned:
            continue
        if always_allowed or any(alt in owned for alt in alternatives):
            continue
        return False
    return True
