"""
Exercise catalog
Static exercise templates, focus-area tables and equipment requirements.
Everything here is read-only module state loaded once at import.
"""

from types import MappingProxyType
from typing import Any, Dict, Optional, Tuple

FITNESS_LEVELS = ('beginner', 'intermediate', 'advanced')
FOCUS_AREAS = ('upper body', 'lower body', 'core', 'cardio', 'full body')
INTENSITIES = ('low', 'moderate', 'high')

EQUIPMENT_TAGS = (
    'dumbbells', 'barbell', 'bench', 'pullup_bar', 'box_platform', 'dip_bars',
    'ghd_machine', 'rowing_machine', 'treadmill', 'bike', 'medicine_balls',
    'kettlebells', 'resistance_bands', 'lat_pulldown', 'leg_press',
    'cable_machine', 'smith_machine',
)

def _entry(name, sets, rest, category, instructions, reps=None, duration=None):
    entry = {'name': name, 'sets': sets}
    if reps is not None:
        entry['reps'] = reps
    if duration is not None:
        entry['duration'] = duration
    entry.update({'rest': rest, 'category': category, 'instructions': instructions})
    return MappingProxyType(entry)

# Per-level strength and cardio templates
WORKOUT_TEMPLATES = MappingProxyType({
    'beginner': MappingProxyType({
        'strength': (
            _entry("Barbell Back Squats", 3, "90 seconds", "lower body",
                   "Barbell on upper back, squat down keeping chest up", reps="8-10"),
            _entry("Barbell Bench Press", 3, "90 seconds", "upper body",
                   "Lie on bench, lower barbell to chest, press up", reps="8-10"),
            _entry("Dumbbell Push-ups", 3, "60 seconds", "upper body",
                   "Hold dumbbells in hands, perform push-ups with dumbbells on ground", reps="8-12"),
            _entry("Dumbbell Squats", 3, "60 seconds", "lower body",
                   "Hold dumbbells at sides, squat down keeping chest up", reps="12-15"),
            _entry("Dumbbell Rows", 3, "60 seconds", "upper body",
                   "Bend forward, pull dumbbell to hip, alternate arms", reps="10-12 each arm"),
            _entry("Dumbbell Lunges", 3, "60 seconds", "lower body",
                   "Hold dumbbells at sides, step forward into lunge", reps="10-12 each leg"),
            _entry("Dumbbell Shoulder Press", 3, "60 seconds", "upper body",
                   "Press dumbbells overhead, lower with control", reps="8-10"),
        ),
        'cardio': (
            _entry("Barbell Thrusters", 3, "90 seconds", "cardio",
                   "Front rack position, squat, press overhead as you stand", reps="6-8"),
            _entry("Dumbbell Thrusters", 3, "60 seconds", "cardio",
                   "Hold dumbbells at shoulders, squat then press overhead", reps="8-12"),
            _entry("Dumbbell Swings", 3, "60 seconds", "cardio",
                   "Swing dumbbell between legs, thrust hips forward", reps="12-15"),
            _entry("Mountain Climbers", 3, "45 seconds", "cardio",
                   "From plank position, alternate bringing knees toward chest", duration="30 seconds"),
            _entry("Jumping Jacks", 3, "30 seconds", "cardio",
                   "Jump while raising arms overhead, return to starting position", duration="1 minute"),
        ),
    }),
    'intermediate': MappingProxyType({
        'strength': (
            _entry("Barbell Deadlifts", 3, "120 seconds", "lower body",
                   "Stand over barbell, grip and lift with straight back", reps="6-8"),
            _entry("Barbell Overhead Press", 3, "90 seconds", "upper body",
                   "Press barbell overhead from shoulder level", reps="6-8"),
            _entry("Barbell Front Squats", 3, "120 seconds", "lower body",
                   "Barbell in front rack position, squat down", reps="6-8"),
            _entry("Dumbbell Bench Press", 3, "90 seconds", "upper body",
                   "Lie on bench, press dumbbells up from chest", reps="8-12"),
            _entry("Dumbbell Deadlifts", 3, "90 seconds", "lower body",
                   "Hold dumbbells in front, hinge at hips, stand up", reps="10-12"),
            _entry("Dumbbell Lateral Raises", 3, "60 seconds", "upper body",
                   "Raise dumbbells to sides, lower with control", reps="10-12"),
            _entry("Dumbbell Step-ups", 3, "90 seconds", "lower body",
                   "Hold dumbbells, step up onto box, alternate legs", reps="10-12 each leg"),
            _entry("Dumbbell Bicep Curls", 3, "60 seconds", "upper body",
                   "Curl dumbbells to shoulders, lower with control", reps="10-12"),
        ),
        'cardio': (
            _entry("Barbell Clean & Press", 3, "90 seconds", "cardio",
                   "Clean barbell to shoulders, then press overhead", reps="5-6"),
            _entry("Dumbbell Clean & Press", 3, "90 seconds", "cardio",
                   "Clean dumbbells to shoulders, then press overhead", reps="6-8"),
            _entry("Dumbbell Snatches", 3, "90 seconds", "cardio",
                   "Swing dumbbell up to overhead position", reps="5-8 each arm"),
            _entry("Burpees", 3, "90 seconds", "cardio",
                   "Squat, jump back to plank, do push-up, jump forward, jump up", reps="8-12"),
            _entry("Box Jumps", 3, "90 seconds", "cardio",
                   "Jump onto elevated surface, step down, repeat", reps="8-12"),
        ),
    }),
    'advanced': MappingProxyType({
        'strength': (
            _entry("Barbell Clean & Press", 3, "120 seconds", "full body",
                   "Clean barbell to shoulders, then press overhead", reps="5-6"),
            _entry("Barbell Snatches", 3, "120 seconds", "full body",
                   "Swing barbell up to overhead position in one motion", reps="3-5"),
            _entry("Barbell Romanian Deadlifts", 3, "120 seconds", "lower body",
                   "Hinge at hips, lower barbell down legs", reps="6-8"),
            _entry("Dumbbell Incline Press", 3, "120 seconds", "upper body",
                   "Lie on incline bench, press dumbbells up from chest", reps="6-8"),
            _entry("Dumbbell Bulgarian Split Squats", 3, "120 seconds", "lower body",
                   "Back foot on bench, squat down with dumbbells", reps="8-10 each leg"),
            _entry("Dumbbell Arnold Press", 3, "120 seconds", "upper body",
                   "Start with dumbbells at chin, rotate and press overhead", reps="6-8"),
            _entry("Dumbbell Romanian Deadlifts", 3, "120 seconds", "lower body",
                   "Hinge at hips, lower dumbbells down legs", reps="8-10"),
            _entry("Dumbbell Tricep Extensions", 3, "90 seconds", "upper body",
                   "Extend arms overhead, lower dumbbells behind head", reps="8-10"),
        ),
        'cardio': (
            _entry("Barbell Complex", 3, "120 seconds", "cardio",
                   "Clean, press, squat, row, deadlift - all with barbell", reps="3-5 each movement"),
            _entry("Dumbbell Complex", 3, "120 seconds", "cardio",
                   "Clean, press, squat, row, deadlift - all with dumbbells", reps="5 each movement"),
            _entry("Dumbbell Man Makers", 3, "120 seconds", "cardio",
                   "Row, push-up, clean, press - all in one movement", reps="6-8"),
            _entry("Burpees", 4, "90 seconds", "cardio",
                   "Squat, jump back to plank, do push-up, jump forward, jump up", reps="10-15"),
            _entry("Box Jumps", 4, "90 seconds", "cardio",
                   "Jump onto elevated surface, step down, repeat", reps="10-15"),
        ),
    }),
})

FOCUS_AREA_EXERCISES = MappingProxyType({
    "upper body": ("Barbell Bench Press", "Barbell Overhead Press", "Barbell Rows", "Dumbbell Push-ups",
                   "Dumbbell Rows", "Dumbbell Shoulder Press", "Dumbbell Bench Press", "Dumbbell Lateral Raises",
                   "Dumbbell Bicep Curls", "Dumbbell Incline Press", "Dumbbell Arnold Press", "Pull-ups", "Push-ups"),
    "lower body": ("Barbell Back Squats", "Barbell Front Squats", "Barbell Deadlifts", "Barbell Romanian Deadlifts",
                   "Dumbbell Squats", "Dumbbell Lunges", "Dumbbell Deadlifts", "Dumbbell Step-ups",
                   "Dumbbell Bulgarian Split Squats", "Dumbbell Romanian Deadlifts", "Box Jumps", "Calf Raises",
                   "Lunges"),
    "core": ("Plank", "Crunches", "Russian Twists", "Leg Raises", "Mountain Climbers", "Dumbbell Woodchops",
             "Dumbbell Side Bends", "Dumbbell Windmills", "Hollow Holds", "L-Sits", "GHD Sit-ups"),
    "cardio": ("Barbell Thrusters", "Barbell Clean & Press", "Dumbbell Thrusters", "Dumbbell Swings",
               "Dumbbell Clean & Press", "Dumbbell Snatches", "Burpees", "Mountain Climbers", "Jumping Jacks",
               "Box Jumps", "Row", "Running"),
    "full body": ("Barbell Thrusters", "Barbell Clean & Press", "Barbell Complex", "Dumbbell Thrusters",
                  "Dumbbell Complex", "Dumbbell Man Makers", "Burpees", "Mountain Climbers", "Jumping Jacks",
                  "Box Jumps", "Dumbbell Clean & Press", "Wall Balls"),
})

# Exercise name -> required equipment tags (empty = bodyweight)
EXERCISE_EQUIPMENT = MappingProxyType({
    "Barbell Bench Press": ("barbell", "bench"),
    "Barbell Overhead Press": ("barbell",),
    "Barbell Rows": ("barbell",),
    "Barbell Back Squats": ("barbell",),
    "Barbell Front Squats": ("barbell",),
    "Barbell Deadlifts": ("barbell",),
    "Barbell Romanian Deadlifts": ("barbell",),
    "Barbell Thrusters": ("barbell",),
    "Barbell Clean & Press": ("barbell",),
    "Barbell Complex": ("barbell",),
    "Barbell Snatches": ("barbell",),
    "Dumbbell Push-ups": ("dumbbells",),
    "Dumbbell Rows": ("dumbbells",),
    "Dumbbell Shoulder Press": ("dumbbells",),
    "Dumbbell Bench Press": ("dumbbells", "bench"),
    "Dumbbell Lateral Raises": ("dumbbells",),
    "Dumbbell Bicep Curls": ("dumbbells",),
    "Dumbbell Incline Press": ("dumbbells", "bench"),
    "Dumbbell Arnold Press": ("dumbbells",),
    "Dumbbell Squats": ("dumbbells",),
    "Dumbbell Lunges": ("dumbbells",),
    "Dumbbell Deadlifts": ("dumbbells",),
    "Dumbbell Step-ups": ("dumbbells", "box_platform"),
    "Dumbbell Bulgarian Split Squats": ("dumbbells", "bench"),
    "Dumbbell Romanian Deadlifts": ("dumbbells",),
    "Dumbbell Thrusters": ("dumbbells",),
    "Dumbbell Clean & Press": ("dumbbells",),
    "Dumbbell Snatches": ("dumbbells",),
    "Dumbbell Complex": ("dumbbells",),
    "Dumbbell Man Makers": ("dumbbells",),
    "Dumbbell Woodchops": ("dumbbells",),
    "Dumbbell Side Bends": ("dumbbells",),
    "Dumbbell Windmills": ("dumbbells",),
    "Dumbbell Swings": ("dumbbells",),
    "Dumbbell Tricep Extensions": ("dumbbells",),
    "Pull-ups": ("pullup_bar",),
    "Push-ups": (),
    "Box Jumps": ("box_platform",),
    "Burpees": (),
    "Mountain Climbers": (),
    "Jumping Jacks": (),
    "Plank": (),
    "Crunches": (),
    "Russian Twists": ("dumbbells",),
    "Leg Raises": (),
    "Hollow Holds": (),
    "L-Sits": ("dip_bars",),
    "GHD Sit-ups": ("ghd_machine",),
    "Calf Raises": ("box_platform",),
    "Lunges": (),
    "Row": ("rowing_machine",),
    "Running": ("treadmill",),
    "Wall Balls": ("medicine_balls",),
    "Kettlebell Swings": ("kettlebells",),
    "Kettlebell Clean & Press": ("kettlebells",),
    "Kettlebell Snatches": ("kettlebells",),
    "Resistance Band Rows": ("resistance_bands",),
    "Resistance Band Squats": ("resistance_bands",),
    "Resistance Band Press": ("resistance_bands",),
    "Lat Pulldown": ("lat_pulldown",),
    "Leg Press": ("leg_press",),
    "Cable Rows": ("cable_machine",),
    "Cable Press": ("cable_machine",),
    "Smith Machine Squats": ("smith_machine",),
    "Smith Machine Press": ("smith_machine",),
    "Dip Bar Dips": ("dip_bars",),
    "Bike": ("bike",),
})

# Defaults for focus-area exercises that have no template entry
LEVEL_DEFAULT_REPS = MappingProxyType({'beginner': '8-12', 'intermediate': '10-15', 'advanced': '12-20'})
LEVEL_DEFAULT_REST = MappingProxyType({'beginner': '60 seconds', 'intermediate': '90 seconds', 'advanced': '120 seconds'})

# Static pools for the synthetic AI fallback workout, grouped by movement type
MOVEMENT_POOLS = MappingProxyType({
    'barbell': ('Back Squats', 'Front Squats', 'Deadlifts', 'Bench Press', 'Overhead Press',
                'Clean & Press', 'Snatches', 'Thrusters', 'Romanian Deadlifts'),
    'dumbbell': ('Dumbbell Squats', 'Dumbbell Lunges', 'Dumbbell Deadlifts', 'Dumbbell Bench Press',
                 'Dumbbell Shoulder Press', 'Dumbbell Rows', 'Dumbbell Thrusters', 'Dumbbell Clean & Press',
                 'Dumbbell Snatches', 'Dumbbell Complex'),
    'gymnastics': ('Pull-ups', 'Push-ups', 'Toes-to-bar', 'L-Sits'),
    'bodyweight': ('Air Squats', 'Lunges', 'Box Jumps', 'Burpees', 'Mountain Climbers', 'Pistol Squats'),
    'monostructural': ('Running', 'Rowing', 'Air Bike', 'Jump Rope', 'Double-unders'),
    'machine': ('Leg Press', 'Lat Pulldown', 'Cable Machine Exercise', 'Smith Machine Exercise'),
    'other': ('Kettlebell Swings', 'Resistance Band Pulls', 'Medicine Ball Slams', 'Box Step-Ups'),
    'core': ('Plank', 'Side Plank', 'Russian Twists', 'V-Ups', 'Hanging Knee Raises', 'Hollow Holds',
             'Sit-Ups', 'Abmat Sit-Ups', 'Bicycle Crunches', 'Leg Raises', 'Flutter Kicks',
             'Superman Holds', 'Dead Bugs'),
})

CORE_POOL = MOVEMENT_POOLS['core']

# Focus area -> (exercise name, movement type) for the synthetic fallback
FALLBACK_POOLS = MappingProxyType({
    'full body': (('Air Squats', 'bodyweight'), ('Push-ups', 'gymnastics'), ('Burpees', 'bodyweight'),
                  ('Dumbbell Thrusters', 'dumbbell'), ('Pull-ups', 'gymnastics'),
                  ('Kettlebell Swings', 'other'), ('Plank', 'core'), ('Russian Twists', 'core')),
    'upper body': (('Bench Press', 'barbell'), ('Overhead Press', 'barbell'),
                   ('Dumbbell Shoulder Press', 'dumbbell'), ('Dumbbell Rows', 'dumbbell'),
                   ('Pull-ups', 'gymnastics'), ('Push-ups', 'gymnastics'), ('Lat Pulldown', 'machine')),
    'lower body': (('Back Squats', 'barbell'), ('Deadlifts', 'barbell'), ('Dumbbell Lunges', 'dumbbell'),
                   ('Air Squats', 'bodyweight'), ('Box Jumps', 'bodyweight'), ('Pistol Squats', 'bodyweight'),
                   ('Leg Press', 'machine')),
    'core': tuple((name, 'core') for name in ('Plank', 'Side Plank', 'Russian Twists', 'V-Ups',
                                              'Hollow Holds', 'Sit-Ups', 'Leg Raises', 'Dead Bugs')),
    'cardio': (('Running', 'monostructural'), ('Rowing', 'monostructural'), ('Air Bike', 'monostructural'),
               ('Jump Rope', 'monostructural'), ('Burpees', 'bodyweight'), ('Mountain Climbers', 'bodyweight'),
               ('Kettlebell Swings', 'other')),
})

def required_equipment(name: str) -> Tuple[str, ...]:
    """Equipment tags an exercise needs; unknown names count as bodyweight"""
    return tuple(EXERCISE_EQUIPMENT.get(name, ()))

def tier_exercises(fitness_level: str):
    """All strength + cardio entries of a level tier, in catalog order"""
    template = WORKOUT_TEMPLATES.get(fitness_level, WORKOUT_TEMPLATES['beginner'])
    return list(template['strength']) + list(template['cardio'])

def find_catalog_entry(name: str, fitness_level: str) -> Optional[Dict[str, Any]]:
    """
    Look up an exercise in a level tier: exact name first, then a
    case-insensitive match. Returns a mutable copy or None.
    """
    entries = tier_exercises(fitness_level)
    for entry in entries:
        if entry['name'] == name:
            return dict(entry)
    name_lower = name.lower().strip()
    for entry in entries:
        if entry['name'].lower() == name_lower:
            return dict(entry)
    return None
