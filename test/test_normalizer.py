import pytest

from treeio.parser.normalizer import NormalizedNewick, normalize_newick, split_trees


class TestNormalizeNewick:
    def test_appends_missing_terminator(self):
        assert normalize_newick("(A,B)").text == "(A,B);"

    def test_keeps_existing_terminator(self):
        assert normalize_newick("(A,B);").text == "(A,B);"

    def test_strips_whitespace_outside_quotes(self):
        result = normalize_newick(" ( A : 0.1 ,\n B\t: 0.2 ) ;\r\n")
        assert result.text == "(A:0.1,B:0.2);"

    def test_quoted_label_keeps_inner_whitespace(self):
        result = normalize_newick('("  Homo sapiens ":1, "Mus  musculus":2);')
        assert result.text == "(Homo sapiens:1,Mus  musculus:2);"

    @pytest.mark.parametrize(
        "text, score",
        [
            ("[-1234.5](A,B);", -1234.5),
            ("[lh=-42.25](A,B);", -42.25),
            ("[ lh = 7 ](A,B);", 7.0),
            ("[1e-3](A,B);", 0.001),
        ],
    )
    def test_leading_comment_becomes_score(self, text, score):
        result = normalize_newick(text)
        assert result.text == "(A,B);"
        assert result.score == pytest.approx(score)

    def test_leading_comment_without_number_leaves_score_unset(self):
        result = normalize_newick("[a comment](A,B);")
        assert result == NormalizedNewick(text="(A,B);", score=None)

    def test_node_brackets_are_not_a_tree_comment(self):
        result = normalize_newick("(A[&&NHX:S=human],B);")
        assert result.text == "(A[&&NHX:S=human],B);"
        assert result.score is None

    def test_empty_input_is_just_a_terminator(self):
        assert normalize_newick("").text == ";"


class TestSplitTrees:
    def test_one_chunk_per_tree(self):
        text = "(A,B);\n(C,D);\n"
        assert split_trees(text) == ["(A,B);", "\n(C,D);"]

    def test_trailing_text_without_terminator_is_kept(self):
        assert split_trees("(A,B);(C,D)") == ["(A,B);", "(C,D)"]

    def test_semicolons_inside_brackets_and_quotes_do_not_split(self):
        text = '[note; with semicolon](A,B);("x;y",C);'
        assert split_trees(text) == ["[note; with semicolon](A,B);", '("x;y",C);']

    def test_blank_chunks_are_dropped(self):
        assert split_trees("  ;\n\n(A,B);\n  \n") == ["\n\n(A,B);"]
