import queue
import threading

from cray.updates import UpdateDispatcher


def test_runs_inline_before_start():
    queued = queue.Queue()
    dispatcher = UpdateDispatcher(queued.put)
    calls = []
    dispatcher.dispatch(lambda: calls.append(threading.get_ident()))
    assert calls == [threading.get_ident()]
    assert queued.empty()
    assert dispatcher.started() is False


def test_queues_after_start():
    queued = queue.Queue()
    dispatcher = UpdateDispatcher(queued.put)
    dispatcher.mark_started()
    assert dispatcher.started() is True
    calls = []

    def update():
        calls.append(1)

    dispatcher.dispatch(update)
    received = queued.get(timeout=2)
    assert received is update
    assert calls == []
    received()
    assert calls == [1]


def test_none_update_is_ignored():
    queued = queue.Queue()
    dispatcher = UpdateDispatcher(queued.put)
    dispatcher.mark_started()
    dispatcher.dispatch(None)
    dispatcher.dispatch(lambda: None)
    queued.get(timeout=2)
    assert queued.empty()


def test_without_enqueue_runs_inline_even_after_start():
    dispatcher = UpdateDispatcher()
    dispatcher.mark_started()
    calls = []
    dispatcher.dispatch(lambda: calls.append("ran"))
    assert calls == ["ran"]