#!/usr/bin/env python3
"""
Evals for Generated Workouts
Lightweight evaluation framework for checking AI workout quality
"""

from typing import Dict, List, Any

from workout_parser import count_main_exercises, list_exercise_names

CORE_KEYWORDS = (
    'plank', 'sit-up', 'sit up', 'situp', 'hollow', 'russian twist', 'l-sit', 'leg raise',
    'v-up', 'knee raise', 'crunch', 'flutter kick', 'superman', 'dead bug', 'toes-to-bar',
)
ADVANCED_GYMNASTICS = ('muscle-up', 'muscle up', 'handstand walk', 'handstand push', 'ring muscle')

MIN_MAIN_EXERCISES = 3
MAX_MAIN_EXERCISES = 10

def _is_core(name: str, category: str = '') -> bool:
    text = f"{name} {category}".lower()
    return 'core' in category.lower() or any(keyword in text for keyword in CORE_KEYWORDS)

def eval_workout_structure(workout: Dict[str, Any]) -> Dict[str, Any]:
    """
    Evaluate if workout has the expected shape:
    - Has a name
    - Has strength and WOD sections with exercises
    - Has warmup and cooldown
    - Every exercise is named
    """
    results = {
        'passed': True,
        'issues': [],
        'score': 0,
        'max_score': 4
    }

    if str(workout.get('name') or '').strip():
        results['score'] += 1
    else:
        results['issues'].append("Workout has no name")
        results['passed'] = False

    missing = [key for key in ('strength', 'wod')
               if not isinstance(workout.get(key), dict) or not workout[key].get('exercises')]
    if not missing:
        results['score'] += 1
    else:
        results['issues'].append(f"Missing or empty sections: {', '.join(missing)}")
        results['passed'] = False

    if isinstance(workout.get('warmup'), dict) and isinstance(workout.get('cooldown'), dict):
        results['score'] += 1
    else:
        results['issues'].append("Missing warmup or cooldown")
        results['score'] -= 0.5  # Penalize but don't fail

    names = list_exercise_names(workout)
    if names and all(str(name).strip() for name in names):
        results['score'] += 1
    else:
        results['issues'].append("Some exercises have no name")
        results['passed'] = False

    results['score_pct'] = (max(results['score'], 0) / results['max_score']) * 100
    return results

def eval_core_requirement(workout: Dict[str, Any]) -> Dict[str, Any]:
    """Full body workouts must contain at least one core movement"""
    results = {
        'applies': str(workout.get('focusArea', '')).lower() == 'full body',
        'has_core': False,
        'core_exercises': [],
        'passed': True,
        'score': 1,
        'max_score': 1
    }

    for key in ('strength', 'wod'):
        section = workout.get(key)
        if isinstance(section, dict):
            for exercise in section.get('exercises') or []:
                if isinstance(exercise, dict) and _is_core(str(exercise.get('name', '')), str(exercise.get('category', ''))):
                    results['core_exercises'].append(exercise.get('name'))
    for exercise in workout.get('exercises') or []:
        if isinstance(exercise, dict) and _is_core(str(exercise.get('name', '')), str(exercise.get('category', ''))):
            results['core_exercises'].append(exercise.get('name'))

    results['has_core'] = bool(results['core_exercises'])
    if results['applies'] and not results['has_core']:
        results['passed'] = False
        results['score'] = 0

    results['score_pct'] = (results['score'] / results['max_score']) * 100
    return results

def eval_gymnastics_exclusion(workout: Dict[str, Any]) -> Dict[str, Any]:
    """No muscle-ups, handstand walks or similar advanced skills"""
    flagged: List[str] = []
    for name in list_exercise_names(workout):
        lowered = str(name).lower()
        if any(skill in lowered for skill in ADVANCED_GYMNASTICS):
            flagged.append(name)

    return {
        'passed': not flagged,
        'flagged': flagged,
        'score': 0 if flagged else 1,
        'max_score': 1,
        'score_pct': 0.0 if flagged else 100.0
    }

def eval_exercise_count(workout: Dict[str, Any]) -> Dict[str, Any]:
    """Main work (strength + WOD + legacy list) should be a sensible size"""
    count = count_main_exercises(workout)
    results = {
        'count': count,
        'passed': MIN_MAIN_EXERCISES <= count <= MAX_MAIN_EXERCISES,
        'score': 0,
        'max_score': 1,
        'issues': []
    }
    if results['passed']:
        results['score'] = 1
    elif count < MIN_MAIN_EXERCISES:
        results['issues'] = [f"Too few exercises: {count} (should be >= {MIN_MAIN_EXERCISES})"]
    else:
        results['issues'] = [f"Too many exercises: {count} (should be <= {MAX_MAIN_EXERCISES})"]

    results['score_pct'] = (results['score'] / results['max_score']) * 100
    return results

def eval_workout_quality(workout: Dict[str, Any]) -> Dict[str, Any]:
    """
    Comprehensive evaluation of workout quality
    Combines all eval functions
    """
    results = {
        'structure': eval_workout_structure(workout),
        'core': eval_core_requirement(workout),
        'gymnastics': eval_gymnastics_exclusion(workout),
        'count': eval_exercise_count(workout),
        'overall_score': 0,
        'overall_passed': False
    }

    # Calculate overall score (weighted)
    results['overall_score'] = (
        results['structure']['score_pct'] * 0.4 +
        results['core']['score_pct'] * 0.25 +
        results['gymnastics']['score_pct'] * 0.2 +
        results['count']['score_pct'] * 0.15
    )

    # Pass if overall score is >= 70% AND no banned skills
    results['overall_passed'] = results['overall_score'] >= 70 and results['gymnastics']['passed']

    return results

def run_evals(workout: Dict[str, Any]) -> Dict[str, Any]:
    """
    Run all evals on a workout and return results
    """
    return eval_workout_quality(workout)

def print_eval_results(results: Dict[str, Any]):
    """
    Pretty print eval results
    """
    print("\n" + "="*50)
    print("EVAL RESULTS")
    print("="*50)

    structure = results['structure']
    print(f"\n📋 Structure: {structure['score']}/{structure['max_score']} ({structure['score_pct']:.0f}%)")
    if structure['issues']:
        print("   Issues:")
        for issue in structure['issues']:
            print(f"   - {issue}")

    core = results['core']
    if not core['applies']:
        print("\n🧱 Core: not required for this focus area")
    elif core['has_core']:
        print(f"\n🧱 Core: ✅ {', '.join(core['core_exercises'])}")
    else:
        print("\n🧱 Core: ❌ full body workout without a core movement")

    gymnastics = results['gymnastics']
    if gymnastics['passed']:
        print("\n🤸 Gymnastics: ✅ no advanced skills")
    else:
        print(f"\n🤸 Gymnastics: ❌ {', '.join(gymnastics['flagged'])}")

    count = results['count']
    print(f"\n📏 Exercises: {count['count']}")
    for issue in count['issues']:
        print(f"   - {issue}")

    print(f"\n🎯 Overall Score: {results['overall_score']:.1f}%")
    if results['overall_passed']:
        print("   ✅ PASSED")
    else:
        print("   ❌ FAILED")

    print("="*50 + "\n")

def summarize_evals(results: Dict[str, Any]) -> Dict[str, Any]:
    """Compact form for API responses"""
    issues = list(results['structure']['issues']) + list(results['count']['issues'])
    if results['core']['applies'] and not results['core']['has_core']:
        issues.append("Full body workout without a core movement")
    issues.extend(f"Advanced gymnastics: {name}" for name in results['gymnastics']['flagged'])
    return {
        'overall_score': round(results['overall_score'], 1),
        'passed': results['overall_passed'],
        'issues': issues
    }

if __name__ == '__main__':
    # Example usage
    from workout_parser import create_fallback_workout

    sample = create_fallback_workout({'fitnessLevel': 'intermediate', 'focusArea': 'full body'})
    print_eval_results(run_evals(sample))
    print(f"Workout: {sample['name']}")
