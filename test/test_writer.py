import pytest

from treeio.config import NewickConfig
from treeio.io import parse_newick
from treeio.writer import NewickWriter, format_number, to_newick

BOOTSTRAP_TREE = "((A:0.11,B:0.22)100:0.33,C:0.44)Root;"


def write(text, parse_options=None, **options):
    tree = parse_newick(text, NewickConfig(**(parse_options or {})))
    return NewickWriter(NewickConfig(**options)).write_tree(tree)


class TestFormatNumber:
    @pytest.mark.parametrize(
        "value, expected",
        [(3.0, "3"), (0.25, "0.25"), (-1.5, "-1.5"), (100.0, "100"), (1e-06, "1e-06")],
    )
    def test_format(self, value, expected):
        assert format_number(value) == expected


class TestNewickWriter:
    def test_default_style(self):
        assert write("(A:1,B:2)C:3;") == "(A:1,B:2)C:3;"

    def test_leaf_only_tree(self):
        assert write("A:0.5;") == "A:0.5;"

    def test_leaf_only_tree_with_tags(self):
        assert write("A:0.5[&&NHX:S=human];") == "A:0.5;"

    def test_anonymous_nodes(self):
        assert write("(,,(,));") == "(,,(,));"

    def test_no_branch_lengths(self):
        assert write("(A:1,B:2)C:3;", no_branch_lengths=True) == "(A,B)C;"

    def test_nobranchlength_style(self):
        assert write("(A:1,B:2)C:3;", bootstrap_style="nobranchlength") == "(A,B)C;"

    def test_traditional_bootstrap_replaces_label(self):
        text = write(
            BOOTSTRAP_TREE,
            parse_options={"internal_node_id": "bootstrap"},
            internal_node_id="bootstrap",
        )
        assert text == "((A:0.11,B:0.22)100:0.33,C:0.44)Root;"

    def test_traditional_bootstrap_needs_bootstrap_label_source(self):
        # bootstrap is known but labels are written as ids
        text = write(BOOTSTRAP_TREE, parse_options={"internal_node_id": "bootstrap"})
        assert text == "((A:0.11,B:0.22):0.33,C:0.44)Root;"

    def test_molphy_bootstrap(self):
        text = write(
            BOOTSTRAP_TREE,
            parse_options={"internal_node_id": "bootstrap"},
            bootstrap_style="molphy",
        )
        assert text == "((A:0.11,B:0.22):0.33[100],C:0.44)Root;"

    def test_no_bootstrap_values(self):
        text = write(
            BOOTSTRAP_TREE,
            parse_options={"internal_node_id": "bootstrap"},
            bootstrap_style="molphy",
            no_bootstrap_values=True,
        )
        assert text == "((A:0.11,B:0.22):0.33,C:0.44)Root;"

    def test_no_internal_node_labels(self):
        text = write("((A,B)E,C)Root;", no_internal_node_labels=True)
        assert text == "((A,B),C);"

    def test_newline_each_node(self):
        assert write("(A,B)C;", newline_each_node=True) == "(A\n,B\n)C\n;"

    def test_order_by_name(self):
        text = write("((D,C)Y,(B,A)X);", order_by="name")
        assert text == "((A,B)X,(C,D)Y);"

    def test_declaration_order_by_default(self):
        assert write("((D,C)X,(B,A)Y);") == "((D,C)X,(B,A)Y);"

    def test_labels_with_spaces_are_quoted(self):
        assert write('("Homo sapiens":1,B:2);') == '("Homo sapiens":1,B:2);'

    def test_tags_are_not_written(self):
        assert write("(A[&&NHX:S=human],B);") == "(A,B);"

    def test_writer_does_not_mutate_tree(self):
        tree = parse_newick("((D:1,C:2)X,B)Y;")
        before = [n.copy() for n in tree.nodes]
        NewickWriter(NewickConfig(order_by="name", newline_each_node=True)).write_tree(tree)
        assert tree.nodes == before


class TestWriteTrees:
    def test_batch_one_per_line(self):
        trees = [parse_newick("(A,B);"), parse_newick("(C,D);")]
        assert NewickWriter().write_trees(trees) == "(A,B);\n(C,D);\n"

    def test_print_tree_count(self):
        trees = [parse_newick("(A,B);"), parse_newick("(C,D);")]
        text = NewickWriter(NewickConfig(print_tree_count=True)).write_trees(trees)
        assert text == " 2\n(A,B);\n(C,D);\n"


class TestRoundTrip:
    @pytest.mark.parametrize(
        "text",
        [
            "(A:1,B:2)C:3;",
            "(A:0.1,B:0.2,(C:0.3,D:0.4)E:0.5)F;",
            "((B:0.2,(C:0.3,D:0.4)E:0.5)F:0.1)A:0.9;",
            "(:0.1,:0.2,(:0.3,:0.4):0.5):0.0;",
            "(((A:0.000003,B:12.5),C),(D,E:1e-08));",
        ],
    )
    def test_topology_ids_and_lengths_survive(self, text):
        tree = parse_newick(text)
        again = parse_newick(to_newick(tree))
        assert [(n.id, n.branch_length, len(n.children)) for n in tree.traverse()] == [
            (n.id, n.branch_length, len(n.children)) for n in again.traverse()
        ]

    def test_quoted_label_survives(self):
        tree = parse_newick('("Homo sapiens":1,B:2);')
        again = parse_newick(to_newick(tree))
        assert again.leaf_names == ["Homo sapiens", "B"]

    @pytest.mark.parametrize("style", ["traditional", "molphy"])
    def test_bootstraps_survive_matching_style(self, style):
        config = NewickConfig(internal_node_id="bootstrap", bootstrap_style=style)
        tree = parse_newick(BOOTSTRAP_TREE, config)
        again = parse_newick(to_newick(tree, config), config)
        assert [n.bootstrap for n in again.traverse()] == [
            n.bootstrap for n in tree.traverse()
        ]
        assert again.find_node("Root") is not None
