import threading

from video_api.utils.locks import ReadWriteLock


def test_readers_share_the_lock():
    lock = ReadWriteLock()
    second_reader_in = threading.Event()

    def second_reader():
        with lock.read_locked():
            second_reader_in.set()

    with lock.read_locked():
        thread = threading.Thread(target=second_reader)
        thread.start()
        assert second_reader_in.wait(timeout=2)
    thread.join(timeout=2)


def test_writer_waits_for_readers():
    lock = ReadWriteLock()
    writer_in = threading.Event()

    def writer():
        with lock.write_locked():
            writer_in.set()

    lock.acquire_read()
    thread = threading.Thread(target=writer)
    thread.start()
    assert not writer_in.wait(timeout=0.1)

    lock.release_read()
    assert writer_in.wait(timeout=2)
    thread.join(timeout=2)


def test_waiting_writer_blocks_new_readers():
    lock = ReadWriteLock()
    order = []
    writer_in = threading.Event()
    reader_in = threading.Event()

    def writer():
        with lock.write_locked():
            order.append("writer")
            writer_in.set()

    def late_reader():
        with lock.read_locked():
            order.append("reader")
            reader_in.set()

    lock.acquire_read()
    writer_thread = threading.Thread(target=writer)
    writer_thread.start()
    # give the writer time to queue up behind the held read lock
    assert not writer_in.wait(timeout=0.1)

    reader_thread = threading.Thread(target=late_reader)
    reader_thread.start()
    assert not reader_in.wait(timeout=0.1)

    lock.release_read()
    assert writer_in.wait(timeout=2)
    assert reader_in.wait(timeout=2)
    writer_thread.join(timeout=2)
    reader_thread.join(timeout=2)

    assert order == ["writer", "reader"]


def test_writers_are_exclusive():
    lock = ReadWriteLock()
    counter = {"value": 0}

    def bump():
        for _ in range(1000):
            with lock.write_locked():
                current = counter["value"]
                counter["value"] = current + 1

    threads = [threading.Thread(target=bump) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=10)

    assert counter["value"] == 4000
