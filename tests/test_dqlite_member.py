import pytest

from microcluster.dqlite_member import DqliteMember, NodeInfo, NodeRole


@pytest.mark.parametrize(
    "name, role",
    [("voter", NodeRole.VOTER), ("stand-by", NodeRole.STAND_BY), ("spare", NodeRole.SPARE)],
)
def test_node_info_roles(name, role):
    member = DqliteMember(dqlite_id=42, address="10.0.0.1:9000", role=name, name="m1")
    assert member.node_info() == NodeInfo(id=42, address="10.0.0.1:9000", role=role)


@pytest.mark.parametrize("name", ["voter", "stand-by", "spare"])
def test_role_name_round_trip(name):
    member = DqliteMember(dqlite_id=1, address="a:1", role=name, name="m")
    assert str(member.node_info().role) == name


def test_roles_are_distinct():
    members = [
        DqliteMember(dqlite_id=n, address="a:1", role=r, name="m")
        for n, r in enumerate(["voter", "stand-by", "spare"])
    ]
    assert len({m.node_info().role for m in members}) == 3


@pytest.mark.parametrize("name", ["leader", "", "Voter"])
def test_invalid_role(name):
    member = DqliteMember(dqlite_id=1, address="a:1", role=name, name="m")
    with pytest.raises(ValueError, match=f'invalid dqlite role "{name}"'):
        member.node_info()