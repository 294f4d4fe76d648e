from lazyseq import Some, count_from, iterate


class TestComposability:
    """Test adapter composition and method chaining"""

    def test_method_chaining(self):
        """Test a map, filter, skip and take chain"""
        result = (
            iterate(range(20))
            .map(lambda x: x * 2)
            .filter(lambda x: x > 10)
            .skip(3)
            .take(5)
            .collect()
        )

        expected = [18, 20, 22, 24, 26]
        assert result == expected, f"Expected {expected}, got {result}"

    def test_skip_and_take_composition(self):
        """Test alternating skip and take"""
        result = iterate(range(20)).skip(5).take(10).skip(2).take(5).collect()

        # skip 5 -> 5..19, take 10 -> 5..14, skip 2 -> 7..14, take 5
        expected = [7, 8, 9, 10, 11]
        assert result == expected, f"Expected {expected}, got {result}"

    def test_operation_order_matters(self):
        """Test that filter-then-map and map-then-filter differ"""
        filtered_first = iterate(range(10)).filter(lambda x: x > 5).map(lambda x: x * 2).collect()
        mapped_first = iterate(range(10)).map(lambda x: x * 2).filter(lambda x: x > 5).collect()

        assert filtered_first == [12, 14, 16, 18], f"Unexpected: {filtered_first}"
        assert mapped_first == [6, 8, 10, 12, 14, 16, 18], f"Unexpected: {mapped_first}"

    def test_empty_intermediate_results(self, call_counter):
        """Test that later stages never run when an earlier one yields nothing"""
        result = iterate([1, 2, 3]).filter(lambda x: x > 10).map(call_counter).take(3).collect()

        assert result == [], f"Expected empty list, got {result}"
        assert call_counter.calls == 0, "map must not run when filter yields nothing"

    def test_enumerate_filter_chunks(self):
        """Test keeping even positions and chunking them"""
        result = (
            iterate("abcdefg")
            .enumerate()
            .filter(lambda pair: pair[0] % 2 == 0)
            .map(lambda pair: pair[1])
            .chunks(2)
            .collect()
        )
        assert result == [["a", "c"], ["e", "g"]], f"Unexpected result: {result}"

    def test_flat_map_then_window(self):
        """Test stepping over a flattened sequence"""
        result = iterate([1, 2, 3]).flat_map(lambda n: [n] * n).skip(1).step_by(2).collect()
        # 1 2 2 3 3 3 -> skip 1 -> 2 2 3 3 3 -> every other
        assert result == [2, 3, 3], f"Unexpected result: {result}"

    def test_zip_enumerated_chain(self):
        """Test numbering a chained sequence with an infinite counter"""
        names = iterate(["ann", "bob"]).chain(["cy"])
        result = count_from(1).zip(names).map(lambda pair: f"{pair[0]}. {pair[1]}").collect()
        assert result == ["1. ann", "2. bob", "3. cy"], f"Unexpected result: {result}"

    def test_reverse_of_mapped_slice(self):
        """Test reversing a mapped skip/take window"""
        result = iterate(range(10)).skip(2).take(5).map(lambda x: x * 10).rev().collect()
        assert result == [60, 50, 40, 30, 20], f"Unexpected result: {result}"

    def test_peekable_grouping(self):
        """Test grouping consecutive runs with peek/next_if"""
        seq = iterate([1, 1, 2, 3, 3, 3]).peekable()
        runs = []
        while seq.peek().present:
            head = seq.pull().unwrap()
            run = [head]
            while seq.next_if(lambda x: x == head).present:
                run.append(head)
            runs.append(run)

        assert runs == [[1, 1], [2], [3, 3, 3]], f"Unexpected runs: {runs}"

    def test_infinite_pipeline_with_early_exit(self):
        """Test find over an infinite mapped producer"""
        first_big_square = count_from(1).map(lambda x: x * x).find(lambda x: x > 200)
        assert first_big_square == Some(225), f"Expected Some(225), got {first_big_square}"

    def test_cycle_zip_round_robin(self):
        """Test assigning tasks to workers round robin"""
        workers = iterate(["w1", "w2"]).cycle()
        assignments = iterate(["t1", "t2", "t3"]).zip(workers).collect()
        assert assignments == [("t1", "w1"), ("t2", "w2"), ("t3", "w1")], f"Unexpected: {assignments}"
