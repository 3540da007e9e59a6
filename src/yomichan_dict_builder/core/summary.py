"""取り込み済み辞書の概要テキスト."""

from __future__ import annotations

from .models import Dictionary


def dictionary_info(dictionary: Dictionary, *, short: bool = False, indent: str = "") -> str:
    """辞書の概要を文字列で返す.

    Args:
        dictionary: 取り込み済み辞書
        short: 1行の概要（件数のみ）を返す
        indent: 各行（空行以外）の先頭に付ける文字列。short では無視する

    Examples:
        short=True の場合: "JMdict (English) with 2 terms and 5 tags"
    """
    if short:
        output: list[str] = []
        if dictionary.terms:
            output.append(f"{len(dictionary.terms)} terms")
        if dictionary.kanji:
            output.append(f"{len(dictionary.kanji)} kanji")
        if dictionary.terms_meta:
            output.append(f"{len(dictionary.terms_meta)} terms frequency")
        if dictionary.kanji_meta:
            output.append(f"{len(dictionary.kanji_meta)} kanji frequency")
        if dictionary.tags:
            output.append(f"{len(dictionary.tags)} tags")
        return f"{dictionary.index.title} with {' and '.join(output)}"

    index = dictionary.index
    lines: list[str] = [
        f"{index.title} (format: {index.format}, revision: {index.revision}) {{",
        f"    List = {len(dictionary.terms)} terms / {len(dictionary.kanji)} kanji",
        f"    Meta = {len(dictionary.terms_meta)} terms / {len(dictionary.kanji_meta)} kanji",
        f"    Tags = {len(dictionary.tags)}",
    ]

    if dictionary.kanji:
        stats = {key for kanji in dictionary.kanji for key in kanji.stats}
        lines += ["", f"    Stats = {','.join(sorted(stats))}"]

    if dictionary.terms:
        term_tags = " ".join(sorted({key for term in dictionary.terms for key in term.term_tags}))
        rules = " ".join(sorted({key for term in dictionary.terms for key in term.rules}))
        definitions = " ".join(sorted({key for term in dictionary.terms for key in term.definition_tags}))

        if rules:
            lines += ["", f"    Rules = {rules}"]
        if term_tags:
            lines += ["", f"    Term Tags = {term_tags}"]
        if definitions:
            lines += ["", f"    Definition Tags = {definitions}"]

    if dictionary.tags:
        lines += ["", "    All tags {"]
        for tag in dictionary.tags:
            category = f" ({tag.category})" if tag.category else ""
            lines.append(
                f"        - {tag.name}{category}: {tag.description} [score: {tag.score}, order: {tag.order}]"
            )
        lines.append("    }")

    lines.append("}")

    if indent:
        lines = [indent + line if line else line for line in lines]
    return "\n".join(lines)
