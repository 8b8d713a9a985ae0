"""
AI Grading Service
==================

Forwards a student's submission text to a chat-completion API and returns
the parsed JSON grading result.

One request in, one upstream call out. No retry, no streaming, no partial
results: anything that goes wrong raises ``GradingError`` with a message
suitable for returning to the caller.

The grading model is chosen in configuration (``GRADING_MODEL``):
- gpt-*, o*  -> OpenAI chat completions in JSON mode (default)
- claude-*   -> Anthropic messages
"""
import json
import logging

from . import supabase_client
from ..config import config

logger = logging.getLogger(__name__)


SYSTEM_PROMPT = (
    "You are an expert teacher and grader. Provide fair, detailed, and constructive "
    "feedback on student work. Always respond with valid JSON in the exact format requested."
)

DEFAULT_CRITERIA = "Grade based on accuracy, completeness, effort, and understanding of the material."

RUBRIC_CATEGORIES = ('understanding', 'accuracy', 'completeness', 'effort')

ANTHROPIC_MODEL_MAP = {
    'claude-sonnet': 'claude-sonnet-4-20250514',
    'claude-haiku': 'claude-3-5-haiku-20241022',
    'claude-opus': 'claude-opus-4-20250514',
}


class GradingError(Exception):
    """Raised when a submission cannot be graded."""


# =============================================================================
# PROMPT
# =============================================================================

def build_grading_prompt(assignment: dict, student_name: str, rubric: str, submission_text: str) -> str:
    """Embed the assignment, rubric and submission into the fixed grading prompt."""
    total_points = assignment.get('total_points')
    breakdown = ',\n'.join(
        f'    "{category}": <score out of 25>' for category in RUBRIC_CATEGORIES
    )

    return f"""
You are an expert teacher grading a student assignment. Please provide a detailed, constructive assessment.

ASSIGNMENT DETAILS:
Title: {assignment.get('title')}
Description: {assignment.get('description')}
Total Points: {total_points}

STUDENT NAME: {student_name}

RUBRIC/CRITERIA:
{rubric or DEFAULT_CRITERIA}

STUDENT SUBMISSION:
{submission_text}

Please provide your response in the following JSON format:
{{
  "score": <number between 0 and {total_points}>,
  "percentage": <percentage score>,
  "letterGrade": "<A, B, C, D, or F>",
  "feedback": "<detailed constructive feedback explaining the grade>",
  "strengths": ["<strength 1>", "<strength 2>", "<strength 3>"],
  "improvements": ["<improvement 1>", "<improvement 2>", "<improvement 3>"],
  "rubricBreakdown": {{
{breakdown}
  }}
}}

Be fair, constructive, and encouraging in your feedback while maintaining academic standards."""


# =============================================================================
# PROVIDERS
# =============================================================================

def _provider_for(model: str) -> str:
    if model.startswith('claude'):
        return 'anthropic'
    return 'openai'


def _openai_client():
    from openai import OpenAI
    return OpenAI(api_key=config.openai_api_key)


def _anthropic_client():
    import anthropic
    return anthropic.Anthropic(api_key=config.anthropic_api_key)


def _grade_with_openai(prompt: str, model: str) -> str:
    """Grade using OpenAI chat completions in JSON mode."""
    client = _openai_client()
    try:
        response = client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            max_completion_tokens=config.max_tokens,
            response_format={"type": "json_object"},
        )
    except Exception as e:
        logger.error("OpenAI API error: %s", e)
        raise GradingError(f"OpenAI API error: {e}") from e

    return (response.choices[0].message.content or '').strip()


def _grade_with_anthropic(prompt: str, model: str) -> str:
    """Grade using Anthropic Claude API."""
    client = _anthropic_client()
    actual_model = ANTHROPIC_MODEL_MAP.get(model, model)
    try:
        response = client.messages.create(
            model=actual_model,
            max_tokens=config.max_tokens,
            system=SYSTEM_PROMPT,
            messages=[{"role": "user", "content": prompt}],
        )
    except Exception as e:
        logger.error("Anthropic API error: %s", e)
        raise GradingError(f"Anthropic API error: {e}") from e

    if not response.content:
        return ''
    return response.content[0].text.strip()


def _check_provider_configured(provider: str):
    if provider == 'anthropic':
        if not config.anthropic_api_key:
            raise GradingError('Anthropic API key not configured')
    elif not config.openai_api_key:
        raise GradingError('OpenAI API key not configured')


# =============================================================================
# RESPONSE HANDLING
# =============================================================================

def _strip_code_fence(text: str) -> str:
    """Remove a surrounding ```json ... ``` block if the model added one."""
    if not text.startswith("```"):
        return text
    lines = text.split('\n')
    end = len(lines)
    for i in range(len(lines) - 1, 0, -1):
        if lines[i].strip() == "```":
            end = i
            break
    return '\n'.join(lines[1:end]).strip()


def parse_grading_response(response_text: str) -> dict:
    """
    Parse and shallow-validate the model's JSON answer.

    The result must be an object with ``score`` and ``feedback`` present.
    A score of 0 is a valid grade. The object is returned as-is otherwise.
    """
    try:
        result = json.loads(_strip_code_fence((response_text or '').strip()))
    except (json.JSONDecodeError, TypeError) as e:
        logger.error("Error parsing grading response: %s", e)
        raise GradingError('Failed to parse grading response') from e

    if not isinstance(result, dict):
        raise GradingError('Invalid grading response format')
    if result.get('score') is None or result.get('score') == '' or not result.get('feedback'):
        raise GradingError('Invalid grading response format')
    return result


# =============================================================================
# GRADING
# =============================================================================

def fetch_assignment(assignment_id, user_id=None) -> dict:
    """Load the assignment fields the prompt needs. Scoped to the owner when given."""
    if not assignment_id:
        raise GradingError('Assignment not found')

    db = supabase_client.get_supabase()
    query = db.table('assignments').select('title, description, total_points').eq('id', assignment_id)
    if user_id:
        query = query.eq('user_id', user_id)
    try:
        result = query.limit(1).execute()
    except Exception as e:
        raise GradingError(f"Error fetching assignment: {e}") from e

    if not result.data:
        raise GradingError('Assignment not found')
    return result.data[0]


def grade_submission(assignment_id, rubric, submission_text, student_name, user_id=None, model=None):
    """
    Grade one submission.

    Returns ``(grading, assignment)`` where ``grading`` is the model's JSON
    object passed through unchanged. Raises ``GradingError`` on any failure.
    """
    model = model or config.grading_model
    provider = _provider_for(model)
    _check_provider_configured(provider)

    logger.info("Grading submission for assignment: %s", assignment_id)
    assignment = fetch_assignment(assignment_id, user_id=user_id)

    prompt = build_grading_prompt(assignment, student_name, rubric, submission_text)

    logger.info("Sending request to %s (%s)", provider, model)
    if provider == 'anthropic':
        response_text = _grade_with_anthropic(prompt, model)
    else:
        response_text = _grade_with_openai(prompt, model)

    grading = parse_grading_response(response_text)
    logger.info("Grading completed for assignment: %s", assignment_id)
    return grading, assignment


def grade_batch(assignment_id, rubric, items, user_id=None, model=None):
    """
    Grade several submissions one after another.

    Items missing a student name or submission text are skipped. Each graded
    item reports ``status`` "completed" with its ``grading`` or "error" with
    the error message; one failure does not stop the rest.
    """
    results = []
    for item in items or []:
        student_name = (item.get('studentName') or '').strip()
        submission_text = (item.get('submissionText') or '').strip()
        if not student_name or not submission_text:
            continue

        try:
            grading, _ = grade_submission(
                assignment_id, rubric, submission_text, student_name,
                user_id=user_id, model=model,
            )
            results.append({"studentName": student_name, "status": "completed", "grading": grading})
        except GradingError as e:
            logger.error("Error grading submission for %s: %s", student_name, e)
            results.append({"studentName": student_name, "status": "error", "error": str(e)})

    return results
