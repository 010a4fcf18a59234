"""Prompt templates for LLM interactions."""

import json

from ..shared.schemas import JUPYTER_IMAGE, PRICING_TOKEN

ENHANCEMENT_SYSTEM_PROMPT = (
    "You are a helpful assistant that extracts compute requirements from natural language "
    "descriptions and converts them to structured data for compute marketplace deployments. "
    "You only respond with a single valid JSON object."
)

FOLLOW_UP_SYSTEM_PROMPT = (
    "You are a helpful assistant that generates follow-up questions to gather missing "
    "information for compute deployments."
)

PARAMETER_SCHEMA = """
Expected JSON schema (omit keys you cannot determine):
{
  "name": "<service name>",
  "image": "<container image>",
  "pullPolicy": "Always|IfNotPresent|Never",
  "ports": [{"port": <int>, "as": <int>, "global": <bool>}],
  "env": {"<NAME>": "<value>"},
  "cpu": <int>,
  "memory": "<int>Gi|<int>Mi",
  "storage": "<int>Gi|<int>Ti",
  "gpu": {"units": <int>, "model": "rtx4090|rtx6000-ada|a100|h100|t4|v100"},
  "duration": "<int>h|<int>d|<int>mon",
  "mode": "provider|fizz",
  "region": "westcoast",
  "amount": <number>,
  "count": <int>
}
"""


def build_enhancement_prompt(description: str, extracted: dict, context: str | None = None) -> str:
    """
    Build prompt for refining pattern-extracted parameters.

    Args:
        description: Natural language description from the user
        extracted: Parameters already extracted, serialized with wire aliases
        context: Optional conversation transcript

    Returns:
        Formatted prompt string
    """
    context_block = f"{context}\n" if context else ""

    return f"""I need you to extract compute requirements from this natural language description and convert them to structured data for a deployment.

{context_block}Description: "{description}"

Here's what I've already extracted:
{json.dumps(extracted, indent=2)}

Please analyze the description and enhance or correct the extracted parameters. Fill in any missing values with reasonable defaults based on the context.

Important constraints:
1. Prices are always paid in {PRICING_TOKEN}; do not include a token field
2. For Jupyter notebook deployments, use image "{JUPYTER_IMAGE}"
3. Default mode should be "provider"
4. Default duration should be "2h"
5. Default region should be "westcoast"
6. Default count should be 1

{PARAMETER_SCHEMA}
Return a JSON object with the enhanced parameters. Include all parameters from the original extraction, corrected or enhanced as needed.

Only respond with the JSON object, no other text.
"""


def build_follow_up_prompt(missing_params: list[str], description: str, context: str | None = None) -> str:
    """
    Build prompt asking the LLM for one follow-up question.

    Args:
        missing_params: Labels of the fields still missing
        description: Description the parameters were extracted from
        context: Optional conversation transcript

    Returns:
        Formatted prompt string
    """
    context_block = f"{context}\n" if context else ""

    return f"""{context_block}I need to deploy a compute environment based on this description: "{description}"

I'm missing the following information: {', '.join(missing_params)}

Generate a concise, friendly follow-up question to ask the user for this missing information. Make the question conversational but specific about what's needed. Reply with the question only.
"""
