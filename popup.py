import os, json, html, logging, argparse, sys
from dataclasses import dataclass
from typing import Any, Callable
import requests
from dotenv import load_dotenv
from pydantic import BaseModel

from extract import extract
from prompts import build_prompt, DEFAULT_DIFFICULTY

load_dotenv()

SERVER_URL = os.getenv("BUILDBOARD_SERVER_URL", "https://buildboard-ten.vercel.app/generate")
REQUEST_TIMEOUT = float(os.getenv("BUILDBOARD_TIMEOUT", "60"))
RAW_PREVIEW_LIMIT = 2000

DEFAULT_TITLE = "Project Idea"
DEFAULT_DESCRIPTION = "No description provided."
DEFAULT_TAGS = ["Innovation", "Technology"]

logger = logging.getLogger(__name__)


class RelayError(Exception):
    pass


class Idea(BaseModel):
    title: str = DEFAULT_TITLE
    description: str = DEFAULT_DESCRIPTION
    tags: list[str] = list(DEFAULT_TAGS)


@dataclass
class PopupView:
    """Display state of the popup: loading indicator and result region."""
    loading: bool = False
    result_html: str = ""
    result_hidden: bool = True

    def show_loading(self, show: bool):
        self.loading = show

    def show_result(self, markup: str):
        self.result_html = markup
        self.result_hidden = False

    def hide_result(self):
        self.result_hidden = True


def call_server(prompt: str, server_url: str | None = None) -> str:
    """POST the prompt to the relay and return the model text."""
    r = requests.post(server_url or SERVER_URL, json={"prompt": prompt}, timeout=REQUEST_TIMEOUT)
    if not r.ok:
        raise RelayError("Server error: " + r.text)
    j = r.json()
    if isinstance(j, dict):
        if j.get("text"):
            return j["text"]
        if j.get("output"):
            return j["output"]
    return json.dumps(j, indent=2)


def normalize_idea(parsed: Any) -> Idea:
    # either {"idea": {...}} or the idea object itself
    if isinstance(parsed, dict) and parsed.get("idea"):
        parsed = parsed["idea"]
    if not isinstance(parsed, dict):
        return Idea()
    tags = parsed.get("tags")
    if not tags or not isinstance(tags, list):
        tags = DEFAULT_TAGS
    return Idea(
        title=str(parsed.get("title") or DEFAULT_TITLE),
        description=str(parsed.get("description") or DEFAULT_DESCRIPTION),
        tags=[str(t) for t in tags],
    )


def render_idea(idea: Idea) -> str:
    tags = "".join(f'<span class="result-tag">{html.escape(t)}</span>' for t in idea.tags)
    return (
        f'<h3 class="result-title">{html.escape(idea.title)}</h3>\n'
        f'<p class="result-description">{html.escape(idea.description)}</p>\n'
        f'<div class="result-tags">{tags}</div>'
    )


def render_invalid_json(raw: str) -> str:
    preview = html.escape(raw)[:RAW_PREVIEW_LIMIT]
    return (
        '<pre class="result-description" style="color:#b91c1c;">'
        f"❌ AI returned invalid JSON — see raw output below:\n\n{preview}</pre>"
    )


def render_error(message: str) -> str:
    return f'<p style="color:red;">⚠️ {html.escape(message)}</p>'


def _usable(value) -> bool:
    # null, false, "" and 0 carry no idea; empty containers still render defaults
    if isinstance(value, (dict, list)):
        return True
    return bool(value)


def generate_idea(
    difficulty: str,
    view: PopupView,
    send: Callable[[str], Any] = call_server,
) -> Idea | None:
    """Run one generate action end to end and render the outcome into ``view``.

    Failures end up in the result region, never raised. The loading indicator
    is cleared whatever happens.
    """
    difficulty = (difficulty or "").strip() or DEFAULT_DIFFICULTY
    prompt = build_prompt(difficulty)
    view.show_loading(True)
    view.hide_result()

    try:
        raw = send(prompt)
        if isinstance(raw, (dict, list)):
            parsed, ok = raw, True
        else:
            result = extract(str(raw))
            parsed, ok = result.value, result.ok
            if not ok:
                logger.info("relay text is %s JSON", result.status)

        if not ok or not _usable(parsed):
            view.show_result(render_invalid_json(str(raw)))
            return None

        idea = normalize_idea(parsed)
        view.show_result(render_idea(idea))
        return idea
    except Exception as e:
        logger.warning("generate failed: %s", e)
        view.show_result(render_error(str(e)))
        return None
    finally:
        view.show_loading(False)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Ask BuildBoard for one project idea.")
    parser.add_argument("--difficulty", default=DEFAULT_DIFFICULTY)
    parser.add_argument("--server-url", default=None, help=f"relay endpoint (default {SERVER_URL})")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    view = PopupView()
    idea = generate_idea(args.difficulty, view, send=lambda p: call_server(p, args.server_url))
    print(view.result_html)
    return 0 if idea is not None else 1


if __name__ == "__main__":
    sys.exit(main())
