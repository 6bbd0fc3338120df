from treeio.io import parse_newick

NHX_STRING = (
    "(LC769681:0.000003[&&NHX:LWR=0.181353:LLH=-731.848948:alpha=0.000000],"
    "(LC769682:0.007912[&&NHX:LWR=0.009006:LLH=-734.851523:alpha=1.000000],"
    "LC769692:0.000001[&&NHX:LWR=0.009006:LLH=-734.851479:alpha=1.000000])"
    ":0.000003[&&NHX:LWR=0.009006:LLH=-734.851523:alpha=0.000000]);"
)


def test_species_tags():
    tree = parse_newick("(A[&&NHX:S=human],B[&&NHX:S=mouse]);")
    a, b = tree.children_of(tree.root)
    assert a.id == "A" and a.get_tag_values("S") == ["human"]
    assert b.id == "B" and b.get_tag_values("S") == ["mouse"]
    assert tree.root.tags == {}


def test_empty_tag_block():
    tree = parse_newick("(A[&&NHX:],B:1[&&NHX:]);")
    a, b = tree.children_of(tree.root)
    assert a.id == "A" and a.tags == {}
    assert b.branch_length == 1.0 and b.tags == {}


def test_attribute_without_value_is_dropped():
    tree = parse_newick("(A[&&NHX:S=human:nonsense],B);")
    assert tree.find_node("A").tags == {"S": ["human"]}


def test_real_world_nhx_tree():
    tree = parse_newick(NHX_STRING)
    assert tree.leaf_names == ["LC769681", "LC769682", "LC769692"]

    first = tree.find_node("LC769681")
    assert first.branch_length == 0.000003
    assert first.get_tag_values("LWR") == ["0.181353"]
    assert first.get_tag_values("LLH") == ["-731.848948"]

    inner = tree.parent_of(tree.find_node("LC769682"))
    assert inner.id is None
    assert inner.branch_length == 0.000003
    assert inner.tag_names == ["LWR", "LLH", "alpha"]
    assert inner.get_tag_values("alpha") == ["0.000000"]


def test_tags_on_root():
    tree = parse_newick("(A,B)[&&NHX:D=N];")
    assert tree.root.get_tag_values("D") == ["N"]
