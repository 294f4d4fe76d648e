import pytest

from lazyseq import (
    NOTHING,
    ConfigurationError,
    LazySequenceError,
    Some,
    count_from,
    empty,
    from_fn,
    iterate,
    repeat,
)


class TestConstructionErrors:
    """Test that invalid arguments fail when the chain is built"""

    @pytest.mark.parametrize("build", [
        lambda seq: seq.step_by(0),
        lambda seq: seq.chunks(0),
        lambda seq: seq.take(-1),
        lambda seq: seq.skip(-3),
        lambda seq: seq.step_by(2.5),
    ])
    def test_invalid_argument_raises_at_construction(self, counting_source, build):
        """Test that bad counts are rejected before any element is pulled"""
        source = counting_source([1, 2, 3])
        with pytest.raises(ConfigurationError):
            build(source)
        assert source.pulls == 0, f"Source pulled {source.pulls} times"

    def test_configuration_error_is_a_value_error(self):
        """Test that ConfigurationError can be caught as ValueError"""
        with pytest.raises(ValueError):
            iterate([1]).step_by(0)

    def test_all_errors_share_a_base(self):
        """Test that library errors derive from LazySequenceError"""
        with pytest.raises(LazySequenceError):
            count_from(0).rev()

    def test_pull_back_on_forward_only_sequence(self):
        """Test that pulling from the back of a generator view fails"""
        with pytest.raises(ConfigurationError, match="cannot be traversed from the back"):
            iterate(x for x in [1]).pull_back()


class TestElementValues:
    """Test that None is an ordinary element"""

    def test_none_is_a_valid_element(self):
        """Test that None elements are yielded, not taken as exhaustion"""
        seq = iterate([None, 0, None])
        assert seq.pull() == Some(None)

        rest = seq.collect()
        assert rest == [0, None], f"Unexpected rest: {rest}"

    def test_none_survives_adapters(self):
        """Test that None passes through map and filter"""
        result = iterate([1, None, 2]).map(lambda x: x).filter(lambda x: True).collect()
        assert result == [1, None, 2], f"Unexpected result: {result}"

    def test_some_none_is_present(self):
        """Test that Some(None) differs from NOTHING"""
        assert Some(None).present
        assert Some(None) != NOTHING, "Some(None) must not equal NOTHING"


class TestErrorPropagation:
    """Test that user errors reach the caller unchanged"""

    def test_exception_from_user_function_propagates(self):
        """Test that a failing map function raises on the pull that reaches it"""
        def explode(x):
            if x == 2:
                raise ZeroDivisionError("boom")
            return x

        seq = iterate([1, 2, 3]).map(explode)
        assert seq.pull() == Some(1)
        with pytest.raises(ZeroDivisionError, match="boom"):
            seq.pull()

    def test_exception_from_predicate_propagates(self):
        """Test that a failing predicate raises out of collect"""
        with pytest.raises(KeyError):
            iterate([{}]).filter(lambda d: d["missing"]).collect()


class TestFusedExhaustion:
    """Test that exhausted adapters stay exhausted"""

    def test_adapter_over_reviving_producer_stays_exhausted(self):
        """Test that an adapter ignores a producer that yields again after NOTHING"""
        values = iter([Some(1), NOTHING, Some(2)])
        seq = from_fn(lambda: next(values)).map(lambda x: x * 10)

        assert seq.pull() == Some(10)
        assert seq.pull() == NOTHING
        assert seq.pull() == NOTHING, "Adapter must not revive after exhaustion"

    def test_generator_exhausted_after_first_consumer(self):
        """Test that a generator-backed sequence is not restarted"""
        seq = iterate(x * x for x in range(3))
        assert seq.collect() == [0, 1, 4]

        again = seq.collect()
        assert again == [], f"Expected empty list, got {again}"

    def test_from_fn_must_return_option(self):
        """Test that from_fn rejects callbacks returning bare values"""
        with pytest.raises(TypeError, match="must return an Option"):
            from_fn(lambda: 1).pull()


class TestProducers:
    """Test root producers"""

    def test_count_from_with_step(self):
        """Test an arithmetic progression"""
        result = count_from(10, 5).take(3).collect()
        assert result == [10, 15, 20], f"Unexpected result: {result}"

    def test_repeat(self):
        """Test repeating one value"""
        result = repeat("x").take(3).collect(str)
        assert result == "xxx", f"Unexpected result: {result}"

    def test_empty(self):
        """Test the empty producer from both ends"""
        assert empty().collect() == []
        result = empty().rev().collect()
        assert result == [], f"Expected empty list, got {result}"

    def test_from_fn_counter(self):
        """Test a procedural producer that ends on its own"""
        state = {"n": 0}

        def next_square():
            state["n"] += 1
            if state["n"] > 4:
                return NOTHING
            return Some(state["n"] ** 2)

        result = from_fn(next_square).collect()
        assert result == [1, 4, 9, 16], f"Unexpected result: {result}"

    def test_unbounded_producers_report_it(self):
        """Test the is_unbounded capability"""
        assert count_from(0).is_unbounded
        assert repeat(1).is_unbounded
        assert not count_from(0).take(3).is_unbounded, "take() bounds an infinite producer"
        assert not iterate([1]).is_unbounded, "A list view is finite"
