from yozefu.topic import (
    ConsumerGroupDetail,
    ConsumerGroupMember,
    ConsumerGroupState,
    MemberAssignment,
    TopicDetail,
)


def test_lag_of_single_member():
    group = ConsumerGroupDetail(
        name="g", members=[ConsumerGroupMember(member="m", start_offset=0, end_offset=5)]
    )
    assert group.lag() == 5


def test_lag_without_members_is_zero():
    assert ConsumerGroupDetail(name="g").lag() == 0


def test_lag_is_additive():
    first = ConsumerGroupMember(member="a", start_offset=3, end_offset=17)
    second = ConsumerGroupMember(member="b", start_offset=100, end_offset=250)
    both = ConsumerGroupDetail(members=[first, second])
    assert both.lag() == (
        ConsumerGroupDetail(members=[first]).lag()
        + ConsumerGroupDetail(members=[second]).lag()
    )


def test_default_state_is_unknown():
    assert ConsumerGroupDetail().state is ConsumerGroupState.UNKNOWN


def test_state_display_is_pascal_case():
    preparing = ConsumerGroupState("PreparingRebalance")
    unknown = ConsumerGroupState("UnknownRebalance")
    assert str(preparing) == "PreparingRebalance"
    assert str(unknown) == "UnknownRebalance"


def test_state_parsed_from_its_name():
    assert ConsumerGroupState("Stable") is ConsumerGroupState.STABLE


def test_states_ordered_by_declaration():
    names = ["Stable", "Unknown", "Dead", "Empty"]
    states = sorted(ConsumerGroupState(name) for name in names)
    assert [str(state) for state in states] == ["Unknown", "Empty", "Dead", "Stable"]
    assert ConsumerGroupState("Unknown") < ConsumerGroupState("Empty")


def test_topics_ordered_by_name():
    topics = [TopicDetail(name="b"), TopicDetail(name="a")]
    assert [t.name for t in sorted(topics)] == ["a", "b"]


def test_member_assignment_holds_partitions():
    member = ConsumerGroupMember(
        member="m", assignments=[MemberAssignment(topic="t", partitions=[0, 2])]
    )
    assert member.assignments[0].partitions == [0, 2]
    assert member == ConsumerGroupMember(
        member="m", assignments=[MemberAssignment(topic="t", partitions=[0, 2])]
    )