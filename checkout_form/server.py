"""
Checkout Form MCP Server.

Exposes the checkout form over stdio as five tools: open the form behind the
auth gate, edit fields, submit the purchase, reset, and read the current state.
Card data never leaves the server unmasked.
"""
import asyncio
import json
import logging
import os
from datetime import datetime
from pathlib import Path

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent
from pydantic import ValidationError

from .auth import AuthGate
from .controller import SubmissionController, SubmissionState
from .errors import AuthenticationError, SubmissionConflict
from .form.schema import CARD_FIELDS, FORM_FIELDS, PaymentMethod
from .notifications import InMemoryNotificationSink
from .output_sanitizer import redact_card_number, sanitize_output
from .payments import get_gateway

logger = logging.getLogger(__name__)

# Debug log: records every tool call and response for session review
_DEBUG_LOG_DIR = Path(os.environ.get(
    "CHECKOUT_DEBUG_DIR",
    os.path.expanduser("~/.config/checkout-form/debug"),
))


def _redact_args(args: dict) -> dict:
    """Mask card field values in tool arguments before they are logged."""
    if args.get("name") not in CARD_FIELDS or "value" not in args:
        return args
    masked = dict(args)
    if args["name"] == "card_number":
        masked["value"] = redact_card_number(str(args["value"]))
    else:
        masked["value"] = "***"
    return masked


def _debug_log(tool_name: str, args: dict, result: str) -> None:
    """Append a tool call entry to the debug log file."""
    try:
        _DEBUG_LOG_DIR.mkdir(parents=True, exist_ok=True)
        log_file = _DEBUG_LOG_DIR / f"session_{datetime.now().strftime('%Y-%m-%d')}.log"
        timestamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]

        entry = (
            f"\n{'='*80}\n"
            f"[{timestamp}] TOOL: {tool_name}\n"
            f"ARGS: {sanitize_output(json.dumps(_redact_args(args), indent=2, default=str))}\n"
            f"RESPONSE:\n{result}\n"
        )

        with open(log_file, "a") as f:
            f.write(entry)
    except Exception as e:
        logger.debug("Debug log write failed: %s", e)

server = Server("checkout-form")

# Lazy-initialized singletons
_auth_gate: AuthGate | None = None
_notifications: InMemoryNotificationSink | None = None

# One open checkout per server process
_controller: SubmissionController | None = None


def _get_auth_gate() -> AuthGate:
    global _auth_gate
    if _auth_gate is None:
        _auth_gate = AuthGate()
    return _auth_gate


def _get_notifications() -> InMemoryNotificationSink:
    global _notifications
    if _notifications is None:
        _notifications = InMemoryNotificationSink()
    return _notifications


def _payment_timeout() -> float | None:
    value = os.environ.get("CHECKOUT_PAYMENT_TIMEOUT")
    return float(value) if value else None


def _form_view(controller: SubmissionController) -> dict:
    """Everything the UI needs to render the form right now."""
    view = {
        "form": controller.state.snapshot(),
        "submission": controller.status.to_dict(),
        "can_submit": controller.can_submit,
        "notifications": [n.to_dict() for n in _get_notifications().drain()],
    }
    if controller.receipt:
        view["receipt"] = controller.receipt.to_dict()
    return view


_NOT_OPEN = {"status": "error", "message": "No checkout open. Call open_checkout first."}


# ---------------------------------------------------------------------------
# Tool definitions
# ---------------------------------------------------------------------------

@server.list_tools()
async def list_tools() -> list[Tool]:
    return [
        Tool(
            name="open_checkout",
            description=(
                "Open a fresh checkout form. Requires a valid session token when the "
                "server is configured with one. Any previously open form is discarded."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "session_token": {
                        "type": "string",
                        "description": "Session token proving the buyer is signed in",
                    },
                },
                "required": [],
            },
        ),
        Tool(
            name="update_field",
            description=(
                "Set one checkout field. Fields: email, payment_method, card_number, "
                "expiry (MM/YY), cvc. Nothing is validated until submit_order."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "name": {
                        "type": "string",
                        "enum": list(FORM_FIELDS),
                        "description": "Field to set",
                    },
                    "value": {
                        "type": "string",
                        "description": (
                            "New value. payment_method takes one of: "
                            + ", ".join(m.value for m in PaymentMethod)
                        ),
                    },
                },
                "required": ["name", "value"],
            },
        ),
        Tool(
            name="submit_order",
            description=(
                "Validate the form and, if every field passes, charge the buyer once. "
                "Returns all field errors at once when validation fails. Rejected while "
                "a payment is already in flight."
            ),
            inputSchema={
                "type": "object",
                "properties": {},
                "required": [],
            },
        ),
        Tool(
            name="reset_form",
            description="Clear the form back to its defaults so a new purchase can start.",
            inputSchema={
                "type": "object",
                "properties": {},
                "required": [],
            },
        ),
        Tool(
            name="get_form_state",
            description="Show the current form values (card data masked), errors, and submission status.",
            inputSchema={
                "type": "object",
                "properties": {},
                "required": [],
            },
        ),
    ]


# ---------------------------------------------------------------------------
# Tool dispatch
# ---------------------------------------------------------------------------

@server.call_tool()
async def call_tool(name: str, arguments: dict) -> list[TextContent]:
    try:
        if name == "open_checkout":
            result = await _handle_open_checkout(arguments)
        elif name == "update_field":
            result = await _handle_update_field(arguments)
        elif name == "submit_order":
            result = await _handle_submit_order(arguments)
        elif name == "reset_form":
            result = await _handle_reset_form(arguments)
        elif name == "get_form_state":
            result = await _handle_get_form_state(arguments)
        else:
            return [TextContent(type="text", text=f"Unknown tool: {name}")]

        sanitized = sanitize_output(json.dumps(result, indent=2))

        _debug_log(name, arguments, sanitized)
        return [TextContent(type="text", text=sanitized)]

    except Exception as e:
        logger.exception("Tool %s failed", name)
        error_text = sanitize_output(f"Error: {str(e)}")
        _debug_log(name, arguments, error_text)
        return [TextContent(type="text", text=error_text)]


# ---------------------------------------------------------------------------
# Tool implementations
# ---------------------------------------------------------------------------

async def _handle_open_checkout(args: dict) -> dict:
    """Pass the auth gate and start a new checkout form."""
    global _controller
    try:
        user = _get_auth_gate().require_user(args.get("session_token"))
    except AuthenticationError as e:
        return {"status": "denied", "message": str(e)}

    if _controller and _controller.status.state is SubmissionState.PROCESSING:
        return {"status": "rejected", "message": "A payment is being processed. Try again when it finishes."}

    _get_notifications().drain()
    _controller = SubmissionController(
        gateway=get_gateway(),
        notifier=_get_notifications(),
        timeout=_payment_timeout(),
    )
    logger.info("Checkout opened for %s", user.user_id)
    return {"status": "opened", **_form_view(_controller)}


async def _handle_update_field(args: dict) -> dict:
    """Set a single form field."""
    if _controller is None:
        return _NOT_OPEN
    try:
        _controller.update_field(args["name"], args["value"])
    except ValidationError as e:
        # pydantic echoes the rejected input; keep card data out of the reply
        return {"status": "error", "message": f"{args['name']}: {e.errors()[0]['msg']}"}
    except ValueError as e:
        return {"status": "error", "message": str(e)}
    return {"status": "updated", **_form_view(_controller)}


async def _handle_submit_order(args: dict) -> dict:
    """Validate and submit the purchase."""
    if _controller is None:
        return _NOT_OPEN
    try:
        status = await _controller.submit()
    except SubmissionConflict as e:
        return {"status": "rejected", "message": str(e)}

    if _controller.state.errors:
        outcome = "invalid"
    else:
        outcome = status.state.value
    return {"status": outcome, **_form_view(_controller)}


async def _handle_reset_form(args: dict) -> dict:
    """Reset the form to defaults."""
    if _controller is None:
        return _NOT_OPEN
    try:
        _controller.reset()
    except SubmissionConflict as e:
        return {"status": "rejected", "message": str(e)}
    return {"status": "reset", **_form_view(_controller)}


async def _handle_get_form_state(args: dict) -> dict:
    """Current form view."""
    if _controller is None:
        return _NOT_OPEN
    return {"status": "ok", **_form_view(_controller)}


# ---------------------------------------------------------------------------
# Server entry point
# ---------------------------------------------------------------------------

async def main():
    """Run the MCP server over stdio."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    logger.info("Checkout form MCP server starting...")

    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def run():
    """Sync entry point for console_scripts."""
    asyncio.run(main())
