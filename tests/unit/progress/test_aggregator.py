"""
TreeAggregator 테스트

- 기본 시나리오: [A(item, unchecked), B(item, checked), C(no tag)] → 1/2
- 중첩 트리 합산 (root 자신 + 자식 합)
- 잘못된 자식 참조 / 조회 실패 / 순환 자식 그래프
"""

import pytest

from checklist_progress.domain.models import AggregateResult, DocumentNode
from tests.fakes import DONE, FlakyNodeStore, item, make_aggregator


class TestCountScenario:
    """기본 집계 시나리오"""

    @pytest.mark.asyncio
    async def test_root_with_mixed_children(self, store, aggregator):
        # Given
        root = await store.get_node("root", include_children=True)

        # When
        result = await aggregator.count(root)

        # Then
        assert result == AggregateResult(checked=1, total=2)

    @pytest.mark.asyncio
    async def test_count_without_materialized_children(self, store, aggregator):
        """children 미포함 노드는 child_ids로 스토어에서 읽음"""
        root = await store.get_node("root")
        assert root.children is None

        result = await aggregator.count(root)

        assert result == AggregateResult(checked=1, total=2)

    @pytest.mark.asyncio
    async def test_leaf_counts_only_itself(self, store, aggregator):
        leaf = await store.get_node("b", include_children=True)

        assert await aggregator.count(leaf) == AggregateResult(checked=1, total=1)

    @pytest.mark.asyncio
    async def test_no_items(self):
        store = FlakyNodeStore([DocumentNode(id="root", content="Empty", tags=("checklist",))])
        aggregator = make_aggregator(store)

        assert await aggregator.count(await store.get_node("root")) == AggregateResult()


class TestNestedTrees:
    """중첩 트리"""

    def _nested_store(self) -> FlakyNodeStore:
        # root ─┬─ group (no tag) ─┬─ g1 (checked)
        #       │                  └─ g2 (unchecked) ── g2a (checked)
        #       └─ top (checked)
        nodes = [
            DocumentNode(id="root", content="Trip", tags=("checklist",), child_ids=("group", "top")),
            DocumentNode(id="group", content="Packing", parent_id="root", child_ids=("g1", "g2")),
            item("g1", "group", done=True),
            item("g2", "group", done=False, child_ids=("g2a",)),
            item("g2a", "g2", done=True),
            item("top", "root", done=True),
        ]
        return FlakyNodeStore(nodes, schema={"checkbox": [{"ident": DONE, "type": "checkbox"}]})

    @pytest.mark.asyncio
    async def test_descends_through_untagged_and_counted_nodes(self):
        store = self._nested_store()
        aggregator = make_aggregator(store)

        result = await aggregator.count(await store.get_node("root", include_children=True))

        assert result == AggregateResult(checked=3, total=4)

    @pytest.mark.asyncio
    async def test_count_is_sum_of_children_plus_own(self):
        store = self._nested_store()
        aggregator = make_aggregator(store)

        root = await store.get_node("root", include_children=True)
        total = await aggregator.count(root)
        children_sum = AggregateResult()
        for child in root.children:
            children_sum = children_sum + await aggregator.count(child)

        # root itself is not an item, so it contributes nothing
        assert total == children_sum
        assert total.checked <= total.total

    @pytest.mark.asyncio
    async def test_item_without_flag_counts_as_unchecked(self):
        store = FlakyNodeStore(
            [
                DocumentNode(id="root", tags=("checklist",), child_ids=("x",)),
                item("x", "root", done=None),
            ],
            schema={"checkbox": [{"ident": DONE, "type": "checkbox"}]},
        )
        aggregator = make_aggregator(store)

        assert await aggregator.count(await store.get_node("root")) == AggregateResult(checked=0, total=1)


class TestMalformedTrees:
    """잘못된 트리 형태"""

    @pytest.mark.asyncio
    async def test_missing_child_reference_skipped(self, store, aggregator):
        root = await store.get_node("root")
        broken = DocumentNode(id="root", content=root.content, tags=root.tags, child_ids=("a", "ghost", "b"))

        assert await aggregator.count(broken) == AggregateResult(checked=1, total=2)

    @pytest.mark.asyncio
    async def test_malformed_materialized_child_skipped(self, store, aggregator):
        b = await store.get_node("b")
        broken = DocumentNode(id="root", tags=("checklist",), children=("not-a-node", None, b))

        assert await aggregator.count(broken) == AggregateResult(checked=1, total=1)

    @pytest.mark.asyncio
    async def test_child_lookup_failure_skipped(self, store, aggregator):
        store.failing_reads.add("a")

        result = await aggregator.count(await store.get_node("root"))

        assert result == AggregateResult(checked=1, total=1)

    @pytest.mark.asyncio
    async def test_cyclic_child_graph_terminates(self):
        nodes = [
            DocumentNode(id="root", tags=("checklist",), child_ids=("x",)),
            item("x", "root", done=True, child_ids=("y",)),
            item("y", "x", done=False, child_ids=("x", "root")),
        ]
        store = FlakyNodeStore(nodes, schema={"checkbox": [{"ident": DONE, "type": "checkbox"}]})
        aggregator = make_aggregator(store)

        result = await aggregator.count(await store.get_node("root"))

        assert result == AggregateResult(checked=1, total=2)

    @pytest.mark.asyncio
    async def test_deep_chain_does_not_recurse(self):
        """깊은 트리도 스택 깊이와 무관하게 처리"""
        depth = 3000
        nodes = [DocumentNode(id=0, tags=("checklist",), child_ids=(1,))]
        for i in range(1, depth):
            child_ids = (i + 1,) if i + 1 < depth else ()
            nodes.append(item(i, i - 1, done=i % 2 == 0, content=f"step {i} #checkbox", child_ids=child_ids))
        store = FlakyNodeStore(nodes, schema={"checkbox": [{"ident": DONE, "type": "checkbox"}]})
        aggregator = make_aggregator(store)

        result = await aggregator.count(await store.get_node(0))

        assert result.total == depth - 1
        assert result.checked == (depth - 1) // 2
