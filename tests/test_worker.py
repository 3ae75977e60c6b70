import os
import sys
import pickle
import threading
import multiprocessing

import numpy as np

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import mapgen
import worker
from chunks import Chunk


def test_handle_request_returns_payload():
    payload = worker.handle_request({'cx': 1, 'cz': -1, 'seed': 9})
    assert 'error' not in payload
    assert payload['cx'] == 1 and payload['cz'] == -1
    chunk = Chunk.from_payload(payload)
    expected = mapgen.generate_chunk(1, -1, 9)
    assert np.array_equal(chunk.data, expected.data)
    assert np.array_equal(chunk.biome_map, expected.biome_map)


def test_handle_request_reports_errors():
    payload = worker.handle_request({'cx': 'north', 'cz': 0, 'seed': 9})
    assert payload['cx'] == 'north'
    assert payload['cz'] == 0
    assert payload['error']


def test_handle_request_rejects_non_dict():
    payload = worker.handle_request(['cx', 0])
    assert payload['error']
    assert payload['cx'] is None


def test_generators_are_shared():
    a = worker.get_generator(9, {'octaves': 4})
    b = worker.get_generator(9, {'octaves': 4})
    c = worker.get_generator(9, None)
    assert a is b
    assert a is not c


def test_serve_loop():
    parent, child = multiprocessing.Pipe()
    thread = threading.Thread(target=worker.serve, args=(child,), name="ChunkWorker")
    thread.start()
    try:
        payload = worker.request_chunk(parent, 0, 0, seed=3)
        assert Chunk.from_payload(payload).chunk_x == 0
        failed = worker.request_chunk(parent, None, 0, seed=3)
        assert 'error' in failed
        parent.send(['noise', {}])
        parent.send('hello')
        parent.send(['chunk', {}, 'extra'])
        reply = worker.request_chunk(parent, 1, 0, seed=3, opts={'octaves': 4})
        assert 'error' not in reply
        parent.send(['chunk', 'north'])
        kind, failed = pickle.loads(parent.recv_bytes())
        assert kind == 'chunk' and failed['error']
        payload = worker.request_chunk(parent, 2, 0, seed=3)
        assert payload['cx'] == 2
    finally:
        parent.send('quit')
        thread.join(timeout=30)
    assert not thread.is_alive()
