"""
Prompt templates for the translation task.

The system prompt carries the language pair and the output contract.
The user prompt carries the translation items as a JSON array, one item per
request: {"original": <file content>, "translated": ""}.
"""

from __future__ import annotations

import json

SYSTEM_PROMPT_TEMPLATE = """\
Translate from {source_lang} to {target_lang}.

- Translate each object in the array.
- 'original' is the text to be translated.
- 'translated' must not be empty.
- 'context' is additional info if needed.
- 'failure' explains why the previous translation failed.

Special instructions:
- Translate every field value of the JSON document in 'original'; keep the keys \
and the structure of the document exactly as they are.
- Preserve text formatting, case sensitivity, whitespace, and keep roughly the \
same length.
- Do NOT translate or modify placeholders like {{{{variableName}}}}; keep them \
exactly as-is.
- Do NOT add new placeholders or variables; keep the same count and names.
- Do NOT convert {{{{NEWLINE}}}} to \\n.
- Do NOT translate or modify i18n function calls in the form $t(key); return \
them verbatim (e.g. $t(ago) stays $t(ago)).
- Do NOT translate or modify HTML/XML tags (e.g. <button>...</button>, <icon/>, \
<actionButton/>); preserve tag names, attributes, and structure.

Return the translation as a JSON array of the same objects, with 'translated' \
filled in. Do NOT add explanations or any other text.
"""


def build_system_prompt(source_lang: str, target_lang: str) -> str:
    """Fill the language pair into the system prompt."""
    return SYSTEM_PROMPT_TEMPLATE.format(
        source_lang=source_lang,
        target_lang=target_lang,
    )


def build_user_prompt(text: str, source_lang: str, target_lang: str) -> str:
    """
    Build the user-turn message that will be sent to the model.

    Args:
        text:        full content of the source file
        source_lang: e.g. "en"
        target_lang: e.g. "es"

    Returns:
        A formatted prompt string.
    """
    items = [{"original": text, "translated": ""}]
    payload = json.dumps(items, ensure_ascii=False)
    return f"inputLanguage={source_lang}; outputLanguage={target_lang};\n{payload}"
