"""Prompt builders for AI workout generation."""

from __future__ import annotations

import json

from looptimer.timers.constants import MAX_DURATION_SECONDS, MAX_LOOPS_PER_GROUP, MIN_DURATION_SECONDS
from looptimer.timers.models import AdvancedConfig, config_to_dict

AI_MAX_RETRIES = 3
AI_TIMEOUT_SECONDS = 30.0
AI_MODEL = "llama-3.3-70b-versatile"
PROMPT_MAX_LENGTH = 1000

SCHEMA_SPECIFICATION = f"""
## JSON Schema for AdvancedConfig

The output MUST be a valid JSON object matching this exact structure:

```typescript
interface AdvancedConfig {{
  items: WorkoutItem[];
  colors: ColorSettings;
  defaultAlarm: string;
  speakNames: boolean;
}}

type WorkoutItem = IntervalStep | LoopGroup;

interface IntervalStep {{
  id: string;              // Unique identifier (e.g., "1", "2", "3")
  name: string;            // Display name (e.g., "WARM UP", "SQUATS")
  duration: number;        // Duration in seconds ({MIN_DURATION_SECONDS}-{MAX_DURATION_SECONDS})
  type: "prepare" | "work" | "rest";  // Interval type
  color?: string;          // Optional hex color (e.g., "#FF0000")
  skipOnLastLoop?: boolean; // Optional: skip this on last loop iteration
  sound?: string;          // Optional: sound identifier
}}

interface LoopGroup {{
  id: string;              // Unique identifier
  loops: number;           // Number of repetitions (1-{MAX_LOOPS_PER_GROUP})
  items: WorkoutItem[];    // Nested intervals or loops
  collapsed?: boolean;     // Optional: UI state
  color?: string;          // Optional hex color
}}

interface ColorSettings {{
  prepare: string;         // Hex color for prepare intervals
  work: string;            // Hex color for work intervals
  rest: string;            // Hex color for rest intervals
  loop: string;            // Hex color for loops
  nestedLoop: string;      // Hex color for nested loops
}}
```

## Validation Rules

1. **Required fields**: items, colors, defaultAlarm, speakNames
2. **items**: Must be a non-empty array of WorkoutItem objects
3. **colors**: Must include all 5 color properties (prepare, work, rest, loop, nestedLoop) as valid hex colors
4. **defaultAlarm**: Must be a non-empty string (e.g., "beep-1x", "beep-2x", "beep-3x")
5. **speakNames**: Must be a boolean
6. **IntervalStep.duration**: Must be a whole number between {MIN_DURATION_SECONDS} and {MAX_DURATION_SECONDS}
7. **IntervalStep.type**: Must be exactly "prepare", "work", or "rest"
8. **LoopGroup.loops**: Must be a number between 1 and {MAX_LOOPS_PER_GROUP}
9. **LoopGroup.items**: Must be a non-empty array
10. **All IDs**: Must be unique strings
11. **Colors**: Must be valid hex format (e.g., "#FF0000" or "#F00")

## Default Values

Use these defaults when not specified by user:
- colors.prepare: "#3b82f6" (blue)
- colors.work: "#ef4444" (red)
- colors.rest: "#22c55e" (green)
- colors.loop: "#8b5cf6" (purple)
- colors.nestedLoop: "#ec4899" (pink)
- defaultAlarm: "beep-2x"
- speakNames: true
"""

_DEFAULT_COLORS = {
    "prepare": "#3b82f6",
    "work": "#ef4444",
    "rest": "#22c55e",
    "loop": "#8b5cf6",
    "nestedLoop": "#ec4899",
}

_SIMPLE_EXAMPLE = {
    "items": [
        {"id": "1", "name": "WARM UP", "duration": 10, "type": "prepare"},
        {
            "id": "2",
            "loops": 3,
            "items": [
                {"id": "3", "name": "PUSH UPS", "duration": 30, "type": "work"},
                {"id": "4", "name": "REST", "duration": 15, "type": "rest"},
            ],
        },
    ],
    "colors": _DEFAULT_COLORS,
    "defaultAlarm": "beep-2x",
    "speakNames": True,
}

_NESTED_EXAMPLE = {
    "items": [
        {"id": "1", "name": "PREPARE", "duration": 5, "type": "prepare"},
        {
            "id": "2",
            "loops": 2,
            "items": [
                {"id": "3", "name": "SQUATS", "duration": 45, "type": "work"},
                {"id": "4", "name": "REST", "duration": 20, "type": "rest"},
                {
                    "id": "5",
                    "loops": 3,
                    "items": [
                        {"id": "6", "name": "LUNGES", "duration": 30, "type": "work"},
                        {"id": "7", "name": "QUICK REST", "duration": 10, "type": "rest", "skipOnLastLoop": True},
                    ],
                },
            ],
        },
    ],
    "colors": _DEFAULT_COLORS,
    "defaultAlarm": "beep-2x",
    "speakNames": True,
}

EXAMPLES = f"""
## Valid Examples

### Example 1: Simple workout
```json
{json.dumps(_SIMPLE_EXAMPLE, indent=2)}
```

### Example 2: Complex nested workout
```json
{json.dumps(_NESTED_EXAMPLE, indent=2)}
```
"""


def sanitize_prompt(prompt: str) -> str:
    return prompt.strip()[:PROMPT_MAX_LENGTH]


def build_router_prompt(user_prompt: str) -> str:
    """Intent check run before generation; the model answers with a small JSON object."""
    return f"""You are a classifier for a workout timer app. Decide whether the user's request \
is about exercise: a workout, training session, interval routine, stretching, yoga, \
sports drills or a timed focus/break routine such as Pomodoro.

## User Request

"{user_prompt}"

## Output

Respond with ONLY this JSON object, no markdown and no additional text:
{{"isExerciseRelated": true or false, "reason": "one short sentence"}}"""


def build_initial_prompt(user_prompt: str, current_config: AdvancedConfig | None = None) -> str:
    current_state = ""
    if current_config is not None:
        current_state = f"""
## Current Workout State

The user is currently editing this workout:
```json
{json.dumps(config_to_dict(current_config), indent=2)}
```

Preserve the structure and modify according to the user's request.
"""

    return f"""You are a workout timer generator AI. Your task is to generate a valid JSON \
configuration for a workout timer based on the user's natural language request.

{SCHEMA_SPECIFICATION}

{EXAMPLES}

{current_state}

## User Request

"{user_prompt}"

## Instructions

1. Analyze the user's request carefully
2. Generate a workout timer configuration that matches their intent
3. Use appropriate exercise names, durations, and structure
4. Ensure all IDs are unique strings (use sequential numbers: "1", "2", "3", etc.)
5. Use "prepare" type for warm-up/preparation phases
6. Use "work" type for exercise/activity phases
7. Use "rest" type for rest/recovery phases
8. Use loops for repeated sequences
9. Return ONLY the valid JSON object, no markdown code blocks, no explanations, no additional text

Generate the workout configuration now:"""


def build_retry_prompt(user_prompt: str, invalid_json: str, errors: list[str], attempt: int) -> str:
    numbered_errors = "\n".join(f"{index}. {error}" for index, error in enumerate(errors, start=1))
    return f"""RETRY ATTEMPT {attempt}/{AI_MAX_RETRIES}

Your previous response failed validation. Please fix the following issues:

## Original User Request

"{user_prompt}"

## Your Previous Invalid JSON

```json
{invalid_json}
```

## Validation Errors

{numbered_errors}

## Correction Instructions

Generate a corrected JSON that fixes these exact issues while maintaining the user's intent.
Follow the schema specification below:

{SCHEMA_SPECIFICATION}

{EXAMPLES}

## Critical Requirements

1. Fix ALL validation errors listed above
2. Ensure all required fields are present
3. Ensure all data types are correct (numbers as numbers, not strings)
4. Ensure all IDs are unique strings
5. Ensure colors are valid hex format
6. Ensure durations are between {MIN_DURATION_SECONDS} and {MAX_DURATION_SECONDS} seconds
7. Ensure loop counts are between 1 and {MAX_LOOPS_PER_GROUP}
8. Return ONLY valid JSON, no markdown code blocks, no explanations, no additional text

Generate the corrected workout configuration now:"""
