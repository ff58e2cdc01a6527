"""
Prompt construction for AI workout generation
"""

import random
import uuid
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from history_analyzer import iter_planned_exercises, least_used_focus_area, parse_timestamp

EMOJIS = ['🔥', '💪', '🏋️‍♂️', '🏃‍♂️', '🤸‍♂️', '🚴‍♂️', '🏆', '🥇', '🎯', '⏱️', '🦾', '🦵', '🧘‍♂️', '🤖', '🥊', '🧗‍♂️']

MOTIVATIONAL_PHRASES = [
    'Push your limits!',
    'Stronger every day!',
    'No excuses!',
    'Crush your workout!',
    'You got this!',
    'Train insane or remain the same!',
    'Be your best self!',
    'One more rep!',
    'Earn your shower!',
    'Sweat now, shine later!',
]

EXERCISE_POOL = """EXERCISE TYPES TO INCLUDE (choose 5-6 from these, and always include at least one from 'Core' for full body workouts):
- Barbell: Back Squats, Front Squats, Deadlifts, Bench Press, Overhead Press, Clean & Press, Snatches, Thrusters, Romanian Deadlifts
- Dumbbell: Squats, Lunges, Deadlifts, Bench Press, Shoulder Press, Rows, Thrusters, Clean & Press, Snatches, Complex movements
- Gymnastics: Pull-ups, Push-ups, Toes-to-bar, L-Sits (NO advanced gymnastics like muscle-ups)
- Bodyweight: Air Squats, Lunges, Box Jumps, Burpees, Mountain Climbers, Pistol Squats
- Monostructural: Running, Rowing, Air Bike, Jump Rope, Burpees, Double-unders
- Machine: Leg Press, Lat Pulldown, Cable Machine exercises, Smith Machine exercises
- Cardio Equipment: Treadmill, Rowing Machine, Exercise Bike
- Other: Kettlebells, Resistance Bands, Medicine Balls, Box/Platform exercises
- Core: Plank Variations, Russian Twists, V-Ups, Hanging Knee Raises, Hollow Holds, Sit-Ups, Abmat Sit-Ups, Bicycle Crunches, Leg Raises, Flutter Kicks, Superman Holds, Dead Bugs"""

CORE_REQUIREMENT = ("IMPORTANT: The workout MUST include at least one core exercise "
                    "(e.g., planks, sit-ups, hollow holds, Russian twists, L-sits, leg raises, or similar).")

RESPONSE_FORMAT = """Respond with ONLY a JSON object in this shape:
{
  "name": "workout name",
  "warmup": {"duration": "5-8 minutes", "exercises": [{"name": "...", "duration": "...", "instructions": "..."}]},
  "strength": {"duration": "10-15 minutes", "focus": "main lift", "exercises": [{"name": "...", "sets": 5, "reps": "5", "rest": "2 minutes", "category": "strength", "instructions": "...", "scaling": "..."}]},
  "wod": {"duration": "10-15 minutes", "workoutType": "AMRAP", "description": "...", "exercises": [{"name": "...", "reps": "10", "category": "conditioning", "instructions": "...", "scaling": "..."}]},
  "cooldown": {"duration": "3-5 minutes", "exercises": [{"name": "...", "duration": "...", "instructions": "..."}]}
}"""

def analyze_workout_history(workouts: List[Dict[str, Any]]) -> str:
    """Short plain-text summary of recent workouts for the prompt"""
    if not workouts:
        return "No recent workout history available."

    focus_areas = [w.get('focusArea') for w in workouts if w.get('focusArea')]
    most_common = Counter(focus_areas).most_common(1)[0][0] if focus_areas else 'none'

    total_exercises = sum(1 for w in workouts for _ in iter_planned_exercises(w))
    average = round(total_exercises / len(workouts))

    dates = []
    for workout in workouts:
        created = parse_timestamp(workout.get('createdAt'))
        if created is not None:
            dates.append(created.strftime('%Y-%m-%d'))

    return (
        "Recent workout patterns:\n"
        f"- Most common focus area: {most_common}\n"
        f"- Least worked focus area: {least_used_focus_area(workouts)}\n"
        f"- Average exercises per workout: {average}\n"
        f"- Total recent workouts: {len(workouts)}\n"
        f"- Recent workout dates: {', '.join(dates) if dates else 'unknown'}"
    )

def build_workout_prompt(preferences: Dict[str, Any], workout_history: Optional[List[Dict[str, Any]]] = None,
                         rng: Optional[random.Random] = None, now: Optional[datetime] = None) -> str:
    """
    Build the model prompt for one workout suggestion.

    The randomizer line (number, timestamp, uuid, emoji, phrase) only exists to
    keep the model from repeating a cached answer; nothing reads it back.
    """
    rng = rng or random.Random()
    now = now or datetime.now(timezone.utc)

    fitness_level = preferences.get('fitnessLevel')
    focus_area = preferences.get('focusArea')
    equipment = preferences.get('availableEquipment') or []
    equipment_text = ', '.join(equipment) if equipment else 'bodyweight only (no equipment)'

    randomizer = f"{rng.randint(0, 99999)}-{now.isoformat()}"
    request_uuid = uuid.UUID(int=rng.getrandbits(128), version=4)
    emoji = rng.choice(EMOJIS)
    phrase = rng.choice(MOTIVATIONAL_PHRASES)

    history_summary = analyze_workout_history((workout_history or [])[:5])
    core_requirement = f"\n{CORE_REQUIREMENT}\n" if str(focus_area).lower() == 'full body' else ''

    return f"""You are a CrossFit coach. Generate a unique, authentic CrossFit WOD (Workout of the Day) for a user.

{EXERCISE_POOL}

User Preferences: Fitness Level: {fitness_level}, Focus Area: {focus_area}, Duration: {preferences.get('duration')} min, Intensity: {preferences.get('intensity')}.
Available Equipment: {equipment_text}

{history_summary}
{core_requirement}
Requirements:
- 4-6 exercises per workout
- Include warmup and cooldown
- For full body workouts, always include at least one core movement
- Avoid advanced gymnastics (no muscle-ups, handstand walks, etc.)
- Avoid hardcoded or repeated workouts
- Use only the user's available equipment
- Make it fun and challenging!

{RESPONSE_FORMAT}

Randomizer: {randomizer} | UUID: {request_uuid} | {emoji} | {phrase}"""
