"""File discovery, frontmatter extraction, and markdown-it HTML rendering"""

import re
from pathlib import Path
from typing import Any

import yaml
from markdown_it import MarkdownIt
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from mdsite.core.models import ParsedDoc
from mdsite.core.utils.slug import slugify


FRONTMATTER_RE = re.compile(r'^---\s*\n(.*?)\n---\s*(?:\n|$)', re.DOTALL)

# Fenced blocks in these languages hold sample output and render collapsed.
COLLAPSED_LANGS = {'json5'}

_CODE_FORMATTER = HtmlFormatter(nowrap=True)


def highlight_code(code: str, lang: str, attrs: str) -> str:
    """Return Pygments token spans for a fence; an empty string lets markdown-it escape it plainly."""
    if not lang:
        return ''
    try:
        lexer = get_lexer_by_name(lang)
    except ClassNotFound:
        return ''
    return highlight(code, lexer, _CODE_FORMATTER)


def _render_fence(self, tokens, idx, options, env) -> str:
    """Wrap output-only code fences in a <details> element."""
    html = self.fence(tokens, idx, options, env)
    info = tokens[idx].info.strip()
    if info and info.split()[0] in COLLAPSED_LANGS:
        return f"<details>\n<summary>output</summary>\n{html}</details>\n"
    return html


def _render_heading_open(self, tokens, idx, options, env) -> str:
    """Give every heading a slug id, suffixed -1, -2, ... on repeats within a page."""
    seen = env.setdefault('heading_ids', {})
    base = slugify(tokens[idx + 1].content) or 'section'
    count = seen.get(base, 0)
    seen[base] = count + 1
    tokens[idx].attrSet('id', base if count == 0 else f"{base}-{count}")
    return self.renderToken(tokens, idx, options, env)


def make_parser(preset: str) -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name."""
    md = MarkdownIt(preset, options_update={"linkify": False, "highlight": highlight_code})
    md.add_render_rule('fence', _render_fence)
    md.add_render_rule('heading_open', _render_heading_open)
    return md


def split_frontmatter(text: str) -> tuple[Any, str]:
    """Return (frontmatter, body) with the YAML header removed.

    The frontmatter is returned as decoded, without shape checks; a document
    with no header yields an empty dict.
    """
    m = FRONTMATTER_RE.match(text)
    if m:
        try:
            fm = yaml.safe_load(m.group(1))
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML frontmatter: {e}") from e
        return fm, text[m.end():]
    return {}, text


def discover_files(root: Path, pattern: str = '**/*.md') -> list[Path]:
    """Return files under root matching pattern, sorted so the fold order is reproducible."""
    if root.is_file():
        return [root]
    return sorted(p for p in root.glob(pattern) if p.is_file())


def read_file(path: Path) -> str:
    return path.read_text(encoding='utf-8')


def parse_text(path: Path, text: str, parser: MarkdownIt) -> ParsedDoc:
    """Split frontmatter from body and render the body to HTML."""
    frontmatter, body = split_frontmatter(text)
    return ParsedDoc(path=path, body=parser.render(body, {}), frontmatter=frontmatter)


def parse_file(path: Path, parser_config: str = 'gfm-like') -> ParsedDoc:
    """Read and parse a single markdown file."""
    return parse_text(path, read_file(path), make_parser(parser_config))
