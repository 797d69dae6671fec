"""Keyword NLU used by the CLI in place of a real NLU provider.

Input syntax: ``free text @intent slot=value other_slot="two words"``.
"""

import shlex

from parley.core.nlu import NLUEntity, NLUResult


def parse_input(text: str) -> NLUResult:
    """Split a CLI line into raw text, an intent and entities.

    The raw text is what remains after removing ``@intent`` and
    ``name=value`` tokens. Unbalanced quotes fall back to whitespace splitting.
    """
    try:
        tokens = shlex.split(text)
    except ValueError:
        tokens = text.split()

    intent: str | None = None
    entities: list[NLUEntity] = []
    words: list[str] = []
    for token in tokens:
        if token.startswith("@") and len(token) > 1:
            intent = token[1:]
        elif "=" in token and not token.startswith("="):
            name, _, value = token.partition("=")
            entities.append(NLUEntity(name=name, value=value))
        else:
            words.append(token)

    return NLUResult(raw_text=" ".join(words), intent=intent, entities=entities)
