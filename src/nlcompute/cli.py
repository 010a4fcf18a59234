"""Command line entry point.

Sub-commands:
    chat      interactive conversation that ends in a deployment document
    serve     run the REST API with uvicorn
    validate  check an existing deployment document
"""

import argparse
import sys
from collections.abc import Callable
from pathlib import Path

from . import __version__
from .configuration.service import ConfigurationService
from .logging_config import setup_logging
from .orchestration.workflow import ConversationNotFoundError, DeploymentWorkflow
from .settings import Settings
from .shared.schemas import CompletedResponse

EXIT_COMMANDS = ("quit", "exit")
MAX_TURNS = 20


def print_header():
    """Print welcome header."""
    print()
    print("=" * 80)
    print("NATURAL LANGUAGE COMPUTE DEPLOYMENT")
    print("=" * 80)
    print()
    print("Describe the environment you need, for example:")
    print("  'Jupyter notebook with an RTX 4090 for 3 days'")
    print("  '8 cores, 16GB RAM, 100GB storage, running nginx for 2 weeks'")
    print()
    print("Type 'quit' or 'exit' at any time to stop.")
    print("=" * 80)
    print()


def get_user_input(prompt: str, input_fn: Callable[[str], str] = input) -> str | None:
    """
    Read one line from the user.

    Returns:
        Stripped input, or None on end of input or interrupt
    """
    try:
        return input_fn(prompt).strip()
    except (KeyboardInterrupt, EOFError):
        print("\n\nExiting...")
        return None


def run_chat(
    workflow: DeploymentWorkflow,
    existing_yaml: str | None = None,
    output: Path | None = None,
    input_fn: Callable[[str], str] = input,
) -> int:
    """
    Run the interactive question loop until a document is produced.

    Args:
        workflow: Workflow that owns the conversation store
        existing_yaml: Optional document to patch instead of rendering a new one
        output: Optional file the final YAML is written to
        input_fn: Line reader (defaults to the builtin input)

    Returns:
        Process exit code
    """
    print_header()

    print("What compute environment do you want to deploy?")
    description = get_user_input("> ", input_fn)
    if not description or description.lower() in EXIT_COMMANDS:
        print("Goodbye!")
        return 0

    response = workflow.start_conversation(description, existing_yaml=existing_yaml)

    turns = 0
    while not isinstance(response, CompletedResponse):
        if turns >= MAX_TURNS:
            print("Reached the maximum number of questions without a complete request.")
            return 1

        print(f"\nQUESTION: {response.question}\n")
        answer = get_user_input("YOUR ANSWER: ", input_fn)
        if answer is None or answer.lower() in EXIT_COMMANDS:
            print("\nExiting without generating a document.")
            return 1
        if not answer:
            print("(Please provide an answer)")
            continue

        try:
            response = workflow.continue_conversation(
                response.conversation_id, answer, existing_yaml=existing_yaml
            )
        except ConversationNotFoundError as e:
            # Only reachable if the conversation was evicted mid-chat
            print(f"Error: {e}")
            return 1
        turns += 1

    print()
    print("=" * 80)
    print("GENERATED YAML" if response.valid else "GENERATED YAML (validation failed)")
    print("=" * 80)
    print()
    print(response.yaml)

    if response.errors:
        print("Validation errors:")
        for error in response.errors:
            print(f"  - {error}")

    if output:
        output.write_text(response.yaml)
        print(f"✓ Written to {output}")

    return 0 if response.valid else 1


def run_validate(path: Path, configuration_service: ConfigurationService | None = None) -> int:
    """Validate a document file and print the result."""
    if not path.exists():
        print(f"Error: File not found: {path}")
        return 1

    service = configuration_service or ConfigurationService()
    is_valid, errors = service.validate_yaml(path.read_text())

    if is_valid:
        print(f"✓ {path} is valid")
        return 0

    print(f"✗ {path} is invalid:")
    for error in errors:
        print(f"  - {error}")
    return 1


def run_serve(settings: Settings, host: str, port: int) -> int:
    """Run the REST API until interrupted."""
    import uvicorn

    from .api.app import create_app

    uvicorn.run(create_app(settings), host=host, port=port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nlcompute",
        description="Turn natural language compute requests into deployment YAML.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable DEBUG logging (overrides NLCOMPUTE_DEBUG)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    chat = subparsers.add_parser("chat", help="Interactive conversation that produces YAML")
    chat.add_argument(
        "--existing",
        type=Path,
        default=None,
        help="Existing deployment document to patch",
    )
    chat.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Write the final YAML to this file",
    )

    serve = subparsers.add_parser("serve", help="Run the REST API")
    serve.add_argument("--host", default="0.0.0.0", help="Bind address (default: 0.0.0.0)")
    serve.add_argument("--port", type=int, default=8000, help="Port (default: 8000)")

    validate = subparsers.add_parser("validate", help="Validate a deployment document")
    validate.add_argument("file", type=Path, help="Path to YAML document")

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    settings = Settings.from_env()
    debug = args.debug or settings.debug

    if args.command == "serve":
        setup_logging(log_file=settings.log_file, debug=debug)
        return run_serve(settings, args.host, args.port)

    # Keep stdout for the conversation and the document
    setup_logging(log_file=settings.log_file, debug=debug, stream=sys.stderr)

    if args.command == "validate":
        return run_validate(args.file)

    existing_yaml = None
    if args.existing:
        if not args.existing.exists():
            print(f"Error: File not found: {args.existing}")
            return 1
        existing_yaml = args.existing.read_text()

    workflow = DeploymentWorkflow(
        store=settings.build_store(),
        extraction_service=settings.build_extraction_service(),
    )
    return run_chat(workflow, existing_yaml=existing_yaml, output=args.output)


if __name__ == "__main__":
    sys.exit(main())
