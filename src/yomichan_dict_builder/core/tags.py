"""タグ統合（複数辞書 → 共有タグ名前空間）.

辞書ごとに独立して定義されたタグを、一意ID をキーとする1つの名前空間にまとめます。

- 同名で内容が両立するタグは同じIDに統合する（空欄を相手の値で埋める）
- 同名でも内容が食い違うタグは `name`, `name-2`, `name-3` ... の別IDを割り当てる
- Term/Kanji のタグ参照は、その場で名前 → 一意ID に書き換える
- タグの表示名（Tag.name）は書き換えない（IDと名前がずれるのは衝突時のみ）

処理は辞書リストの順に逐次行う。後の辞書の解決結果は、それまでに蓄積された
名前空間の状態に依存するため、並列化はできない。
"""

from __future__ import annotations

from collections.abc import ItemsView, Iterator, Sequence
from dataclasses import replace

from loguru import logger

from .models import Dictionary, Tag


class TagNamespace:
    """一意ID → Tag と、ID ごとの参照回数を保持する共有名前空間."""

    def __init__(self) -> None:
        self.tags: dict[str, Tag] = {}
        self.usage_counts: dict[str, int] = {}

    def __contains__(self, tag_id: object) -> bool:
        return tag_id in self.tags

    def __getitem__(self, tag_id: str) -> Tag:
        return self.tags[tag_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self.tags)

    def __len__(self) -> int:
        return len(self.tags)

    def items(self) -> ItemsView[str, Tag]:
        return self.tags.items()

    def get(self, tag_id: str) -> Tag | None:
        return self.tags.get(tag_id)

    def usage(self, tag_id: str) -> int:
        return self.usage_counts.get(tag_id, 0)

    def use(self, tag_id: str) -> None:
        self.usage_counts[tag_id] = self.usage_counts.get(tag_id, 0) + 1

    def remove(self, tag_id: str) -> None:
        del self.tags[tag_id]
        self.usage_counts.pop(tag_id, None)

    def collisions(self) -> dict[str, Tag]:
        """名前の衝突で別IDが割り当てられたタグ（ID ≠ 表示名）."""
        return {tag_id: tag for tag_id, tag in self.tags.items() if tag_id != tag.name}


def can_merge(tag: Tag, current: Tag) -> bool:
    """同名タグを統合できるか.

    category / description がそれぞれ一致するか、どちらかが空であること。
    """
    same_category = tag.category == current.category or not tag.category or not current.category
    same_description = (
        tag.description == current.description or not tag.description or not current.description
    )
    return same_category and same_description


def merge_into(current: Tag, tag: Tag) -> None:
    """current の空欄（falsy な値）を tag の値で埋める. 既存の値は上書きしない.

    NOTE: order / score も falsy 判定のため、current 側の正当な 0 は後続の非0値で埋まる。
    """
    current.category = current.category or tag.category
    current.description = current.description or tag.description
    current.order = current.order or tag.order
    current.score = current.score or tag.score


class _DictionaryTagMapper:
    """1辞書分のタグ名 → 一意ID の対応表（辞書ごとにリセット）."""

    def __init__(self, namespace: TagNamespace, dictionary: Dictionary) -> None:
        self.namespace = namespace
        self.by_name = {tag.name: tag for tag in dictionary.tags}
        self.mapped: dict[str, str] = {}

    def resolve(self, tag_name: str, used: bool) -> str:
        mapped_id = self.mapped.get(tag_name)
        if mapped_id is not None:
            if used:
                self.namespace.use(mapped_id)
            return mapped_id

        tag = self.by_name.get(tag_name) or Tag(name=tag_name)

        # 空いているIDを探す: まず名前そのもの、次に `name-2`, `name-3` ...
        counter = 1
        tag_id = tag_name
        while True:
            current = self.namespace.get(tag_id)
            if current is None:
                self.namespace.tags[tag_id] = replace(tag)
                break
            if can_merge(tag, current):
                merge_into(current, tag)
                break
            counter += 1
            tag_id = f"{tag_name}-{counter}"

        if tag_id != tag_name:
            logger.debug(f"Tag name collision: '{tag_name}' mapped to '{tag_id}'")

        self.mapped[tag_name] = tag_id
        if used:
            self.namespace.use(tag_id)
        return tag_id

    def resolve_all(self, names: list[str]) -> list[str]:
        return [self.resolve(name, True) for name in names]


def reconcile_tags(
    dictionaries: Sequence[Dictionary],
    *,
    delete_unused: bool = False,
    delete_empty: bool = False,
) -> TagNamespace:
    """全辞書のタグを一意IDの名前空間に統合し、タグ参照を書き換える.

    辞書ごとに2パスで処理する:
        1. 定義済みタグを（参照カウントせずに）先に解決し、IDを確保する
        2. Term の term_tags / definition_tags / rules、Kanji の tags / stats キーを
           解決済みIDに書き換える（未定義のタグは空のタグとして生成される）

    Args:
        dictionaries: 取り込み済み辞書（この順に処理する）
        delete_unused: 参照されていないタグを最後に削除する
        delete_empty: 名前以外が空のタグ（自動生成分）を最後に削除する

    Returns:
        一意ID → Tag の名前空間（参照回数つき）

    Raises:
        TypeError: dictionaries が None の場合
    """
    if dictionaries is None:
        raise TypeError("reconcile_tags() requires a sequence of dictionaries, got None")

    namespace = TagNamespace()
    for dictionary in dictionaries:
        if not dictionary.tags:
            continue

        mapper = _DictionaryTagMapper(namespace, dictionary)

        # 定義済みだが未使用のタグも、他の辞書で使われる可能性があるので先に確保する
        for tag in dictionary.tags:
            mapper.resolve(tag.name, False)

        for term in dictionary.terms:
            term.term_tags = mapper.resolve_all(term.term_tags)
            term.definition_tags = mapper.resolve_all(term.definition_tags)
            term.rules = mapper.resolve_all(term.rules)

        for kanji in dictionary.kanji:
            kanji.tags = mapper.resolve_all(kanji.tags)
            kanji.stats = {mapper.resolve(key, True): value for key, value in kanji.stats.items()}

    for tag_id, tag in list(namespace.items()):
        empty = delete_empty and tag.is_empty()
        unused = delete_unused and not namespace.usage(tag_id)
        if empty or unused:
            namespace.remove(tag_id)

    collisions = namespace.collisions()
    if collisions:
        logger.warning(
            f"{len(collisions)} tag name collision(s) resolved with suffixed ids: "
            f"{', '.join(sorted(collisions))}"
        )
    logger.info(f"Merged {len(namespace)} tags from {len(dictionaries)} dictionaries")
    return namespace
