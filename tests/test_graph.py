from pigcheck.graph import (
    build_package_graph,
    build_specialization_graph,
    hierarchy_report,
    query_by_item_type,
    specialization_cycles,
    specialization_depth,
    unused_classes,
)
from pigcheck.models import Package
from pigcheck.visualizer import generate_visualization

CYCLIC = {
    "id": "pkg:cyclic",
    "graph": [
        {"id": "o:A", "itemType": "pig:Entity", "specializes": "o:B"},
        {"id": "o:B", "itemType": "pig:Entity", "specializes": "o:A"},
        {"id": "o:C", "itemType": "pig:Entity", "specializes": "o:A"},
    ],
}


def test_package_graph_nodes(catalogue):
    g = build_package_graph(Package.model_validate(catalogue))
    assert g.number_of_nodes() == len(catalogue["graph"])
    assert g.graph["package_id"] == "pkg:catalogue"
    assert g.nodes["o:bike1"]["item_type"] == "pig:anEntity"
    assert g.nodes["o:bike1"]["title"] == "Mountain bike"
    assert g.nodes["o:wheel1"]["title"] == "o:wheel1"


def test_package_graph_edges(catalogue):
    g = build_package_graph(Package.model_validate(catalogue))
    assert g.edges["o:bike1", "o:Bike"]["type"] == "hasClass"
    assert g.edges["o:Bike", "o:Product"]["type"] == "specializes"
    assert g.edges["o:bike1", "o:wheel1"]["type"] == "o:partOf"
    assert g.edges["o:rel1", "o:bike1"]["type"] == "o:containsSource"
    assert g.edges["o:partOf", "o:Product"]["type"] == "eligibleEndpoint"


def test_dangling_references_add_no_edges(make_package):
    package = make_package(
        {"id": "o:E", "itemType": "pig:Entity", "specializes": "o:Gone"},
        {"id": "o:a", "itemType": "pig:anEntity", "hasClass": "o:Missing",
         "hasTargetLink": [{"hasClass": "o:l", "idRef": "o:nobody"}]},
    )
    g = build_package_graph(package)
    assert g.number_of_edges() == 0
    assert "o:Gone" not in g


def test_query_by_item_type(catalogue):
    g = build_package_graph(Package.model_validate(catalogue))
    assert sorted(query_by_item_type(g, "pig:Entity")) == ["o:Bike", "o:Product"]


def test_specialization_graph_and_depth(catalogue):
    g = build_specialization_graph(Package.model_validate(catalogue))
    assert set(g.nodes) == {
        "o:Title", "o:Weight", "o:Colour", "o:partOf", "o:containsSource",
        "o:containsTarget", "o:Product", "o:Bike", "o:Contains",
    }
    assert list(g.edges) == [("o:Bike", "o:Product")]
    assert specialization_depth(g, "o:Bike") == 1
    assert specialization_depth(g, "o:Product") == 0
    assert specialization_cycles(g) == []


def test_cycles_are_found():
    g = build_specialization_graph(Package.model_validate(CYCLIC))
    assert specialization_cycles(g) == [["o:A", "o:B"]]
    assert specialization_depth(g, "o:C") == 2


def test_unused_classes(catalogue):
    # every class of the catalogue is referenced somewhere
    assert unused_classes(Package.model_validate(catalogue)) == []
    catalogue["graph"].append({"id": "o:Orphan", "itemType": "pig:Entity"})
    assert unused_classes(Package.model_validate(catalogue)) == ["o:Orphan"]


def test_hierarchy_report(catalogue):
    report = hierarchy_report(Package.model_validate(catalogue))
    assert report.startswith("=== PACKAGE pkg:catalogue ===")
    assert "- pig:Property: 3" in report
    assert "- [pig:Entity] o:Bike -> o:Product (depth 1)" in report
    assert "cyclic" not in report


def test_hierarchy_report_lists_cycles():
    report = hierarchy_report(Package.model_validate(CYCLIC))
    assert "## WARNING: cyclic specialization" in report
    assert "- o:A -> o:B" in report


def test_generate_visualization(tmp_path, monkeypatch, catalogue):
    monkeypatch.chdir(tmp_path)
    g = build_package_graph(Package.model_validate(catalogue))
    out = tmp_path / "out" / "package.html"
    html = generate_visualization(g, output_path=out)
    assert out.exists()
    assert "o:bike1" in html
