"""
Form builder command line.

Usage:
    # Fill in a form and submit it
    form-builder preview registration.json --set age=30 --set username=jo --submit

    # Evaluate a formula
    form-builder eval "2 * (a + b) - c" --var a=3 --var b=4 --var c=1

    # Export JSON Schema + UI Schema
    form-builder export registration.json

    # Manage saved forms
    form-builder forms list
    form-builder forms save registration.json
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from form_builder.config import get_config
from form_builder.engine.formula import evaluate
from form_builder.engine.session import FormSession
from form_builder.exceptions import FormBuilderError
from form_builder.models.field_definitions import FieldKind, FormField
from form_builder.models.form_schema import FormSchema
from form_builder.models.values import format_number
from form_builder.storage import FormRepository, JsonFileFormStore
from form_builder.tracing import setup_tracing

logger = logging.getLogger("form-builder.cli")


def _split_assignment(text: str) -> tuple[str, str]:
    name, sep, value = text.partition("=")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"Expected NAME=VALUE, got {text!r}")
    return name.strip(), value


def parse_field_input(field: FormField, text: str) -> Any:
    """Convert command line text to the value a widget of this field would produce."""
    if field.is_checkbox_group:
        return [item.strip() for item in text.split(",") if item.strip()]
    if field.kind == FieldKind.CHECKBOX:
        return text.strip().lower() in ("true", "1", "yes", "on")
    return text


def load_schema(path: str) -> FormSchema:
    return FormSchema.model_validate_json(Path(path).read_text(encoding="utf-8"))


def session_snapshot(session: FormSession) -> dict[str, Any]:
    """Everything a presentation layer shows for a session, as JSON-ready data."""
    return {
        "form": session.schema.name,
        "state": session.state.value,
        "fields": [
            {
                "id": state.field_id,
                "value": state.value,
                "touched": state.touched,
                "readonly": state.readonly,
                "error": state.visible_error,
            }
            for state in session.field_states()
        ],
        "errors": [error.model_dump(by_alias=True, mode="json") for error in session.errors],
        "derivationFailures": [
            {"fieldId": f.field_id, "formula": f.formula, "message": f.message}
            for f in session.derivation_failures
        ],
    }


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=get_config().indent_json_output, default=str))


def cmd_preview(args: argparse.Namespace) -> int:
    schema = load_schema(args.schema)
    session = FormSession()
    session.load(schema)

    for field_id, text in args.set or []:
        field = schema.get_field(field_id)
        if field is None:
            print(f"Error: unknown field '{field_id}'", file=sys.stderr)
            return 1
        session.set_value(field_id, parse_field_input(field, text))

    exit_code = 0
    if args.submit:
        result = session.submit()
        exit_code = 0 if result.is_valid else 1

    _print_json(session_snapshot(session))
    return exit_code


def cmd_eval(args: argparse.Namespace) -> int:
    variables: dict[str, float] = {}
    for name, text in args.var or []:
        try:
            variables[name] = float(text)
        except ValueError:
            print(f"Error: variable '{name}' is not a number: {text!r}", file=sys.stderr)
            return 2
    print(format_number(evaluate(args.formula, variables)))
    return 0


def cmd_export(args: argparse.Namespace) -> int:
    _print_json(load_schema(args.schema).to_form_config())
    return 0


def cmd_forms(args: argparse.Namespace) -> int:
    repository = FormRepository(JsonFileFormStore(args.store))

    if args.forms_command == "list":
        for form in repository.list_saved_forms():
            print(f"{form.id}\t{form.name}\t{len(form.fields)} fields")
        return 0

    if args.forms_command == "save":
        saved = repository.save_form(load_schema(args.schema))
        if saved is None:
            print("Error: form could not be saved", file=sys.stderr)
            return 1
        print(saved.id)
        return 0

    if args.forms_command == "show":
        form = repository.get_saved_form(args.form_id)
        if form is None:
            print(f"Error: no saved form '{args.form_id}'", file=sys.stderr)
            return 1
        _print_json(form.to_dict())
        return 0

    if args.forms_command == "delete":
        if not repository.delete_form(args.form_id):
            print(f"Error: could not delete form '{args.form_id}'", file=sys.stderr)
            return 1
        return 0

    return 2


def build_parser() -> argparse.ArgumentParser:
    config = get_config()

    parser = argparse.ArgumentParser(
        prog="form-builder",
        description="Evaluate and manage dynamic form schemas",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment Variables:
  FORM_BUILDER_STORE_PATH       Directory of saved forms (default: .form_builder)
  FORM_BUILDER_LOG_LEVEL        Logging level (default: INFO)
  FORM_BUILDER_ENABLE_TRACING   Trace session operations (default: false)
  FORM_BUILDER_TRACE_FILE       Write traces to this JSON Lines file
        """,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    preview = subparsers.add_parser("preview", help="Fill in and submit a form")
    preview.add_argument("schema", help="Path to a form schema JSON file")
    preview.add_argument(
        "--set",
        action="append",
        type=_split_assignment,
        metavar="FIELD=VALUE",
        help="Set a field value (repeatable; comma-separated for checkbox groups)",
    )
    preview.add_argument("--submit", action="store_true", help="Validate the form")
    preview.set_defaults(handler=cmd_preview)

    evaluate_parser = subparsers.add_parser("eval", help="Evaluate an arithmetic formula")
    evaluate_parser.add_argument("formula")
    evaluate_parser.add_argument(
        "--var", action="append", type=_split_assignment, metavar="NAME=NUMBER"
    )
    evaluate_parser.set_defaults(handler=cmd_eval)

    export = subparsers.add_parser("export", help="Print JSON Schema and UI Schema")
    export.add_argument("schema", help="Path to a form schema JSON file")
    export.set_defaults(handler=cmd_export)

    forms = subparsers.add_parser("forms", help="Manage saved forms")
    forms.add_argument(
        "--store",
        default=config.store_path,
        help=f"Store directory (default: {config.store_path})",
    )
    forms_sub = forms.add_subparsers(dest="forms_command", required=True)
    forms_sub.add_parser("list", help="List saved forms")
    save = forms_sub.add_parser("save", help="Save a form schema")
    save.add_argument("schema")
    show = forms_sub.add_parser("show", help="Print a saved form")
    show.add_argument("form_id")
    delete = forms_sub.add_parser("delete", help="Delete a saved form")
    delete.add_argument("form_id")
    forms.set_defaults(handler=cmd_forms)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    config = get_config()
    logging.basicConfig(level=getattr(logging, config.log_level, logging.INFO))
    setup_tracing(
        enabled=config.enable_tracing,
        console=config.trace_to_console,
        verbose=config.verbose_output,
        file_path=config.trace_file,
    )

    args = build_parser().parse_args(argv)
    try:
        return args.handler(args)
    except (FormBuilderError, ValidationError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
