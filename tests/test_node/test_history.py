import pytest

from rheinsim.errors import ConfigurationError
from rheinsim.node import RollingHistory


class TestRollingHistory:
    def test_starts_empty(self):
        history = RollingHistory(3)
        assert len(history) == 0
        assert history.capacity == 3
        assert history.to_list() == []

    def test_keeps_last_n_in_arrival_order(self):
        history = RollingHistory(3)
        for value in [10, 20, 30, 40, 50]:
            history.append(value)
        assert history.to_list() == [30, 40, 50]
        assert list(history) == [30, 40, 50]

    def test_initial_values_are_bounded(self):
        history = RollingHistory(2, [1, 2, 3])
        assert history.to_list() == [2, 3]

    def test_shrink_keeps_most_recent(self):
        history = RollingHistory(5, [1, 2, 3, 4, 5])
        history.resize(3)
        assert history.capacity == 3
        assert history.to_list() == [3, 4, 5]

    def test_grow_keeps_everything(self):
        history = RollingHistory(2, [1, 2])
        history.resize(4)
        history.append(3)
        assert history.to_list() == [1, 2, 3]

    @pytest.mark.parametrize("capacity", [0, -3])
    def test_invalid_capacity_raises(self, capacity: int):
        with pytest.raises(ConfigurationError, match="at least 1"):
            RollingHistory(capacity)

    def test_invalid_resize_raises_and_keeps_state(self):
        history = RollingHistory(3, [1, 2, 3])
        with pytest.raises(ConfigurationError):
            history.resize(0)
        assert history.to_list() == [1, 2, 3]

    def test_max(self):
        assert RollingHistory(4, [3, 9, 2]).max() == 9

    def test_mean_rounds_half_up(self):
        assert RollingHistory(4, [1, 2]).mean() == 2
        assert RollingHistory(4, [1, 2, 2]).mean() == 2

    @pytest.mark.parametrize("method", ["max", "mean"])
    def test_empty_history_raises(self, method: str):
        with pytest.raises(ValueError, match="empty history"):
            getattr(RollingHistory(3), method)()

    def test_repr(self):
        assert repr(RollingHistory(2, [7])) == "RollingHistory(capacity=2, values=[7])"
