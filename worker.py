'''
worker.py -- chunk generation behind a pipe, for running in a separate process
'''

# standard library imports
import time
import pickle
import traceback
import multiprocessing
import multiprocessing.connection

# local imports
import logutil
from mapgen import ChunkGenerator, resolve_options

# Generators only hold permutation tables and options, so one per
# (seed, options) pair is shared by every request in this process.
_generators = {}
MAX_GENERATORS = 8


def get_generator(seed, opts=None):
    key = (int(seed), resolve_options(opts))
    gen = _generators.get(key)
    if gen is None:
        if len(_generators) >= MAX_GENERATORS:
            _generators.clear()
        gen = ChunkGenerator(key[0], key[1])
        _generators[key] = gen
    return gen


def handle_request(request):
    """ Generate the chunk described by a request dict {cx, cz, seed, opts}.

    Returns the chunk payload, or {cx, cz, error} if generation failed so a
    streaming caller can carry on with other chunks.
    """
    if not isinstance(request, dict):
        logutil.log("WORKER", f"malformed request {request!r}", level="WARN")
        return {'cx': None, 'cz': None, 'error': 'malformed request'}
    cx = request.get('cx')
    cz = request.get('cz')
    try:
        gen = get_generator(request.get('seed', 0), request.get('opts'))
        return gen.generate(cx, cz).to_payload()
    except Exception as err:
        logutil.log("WORKER", f"chunk ({cx}, {cz}) failed: {err}\n{traceback.format_exc()}", level="ERROR")
        return {'cx': cx, 'cz': cz, 'error': str(err)}


def serve(conn):
    '''
    Answer ['chunk', request] messages on a multiprocessing connection until
    'quit' is received or the other end goes away. Each reply is a pickled
    ['chunk', payload] sent with send_bytes.
    '''
    logutil.log("WORKER", "worker loop started")
    while True:
        try:
            msg = conn.recv()
        except (EOFError, OSError):
            logutil.log("WORKER", "connection closed, exiting")
            return
        if msg == 'quit':
            logutil.log("WORKER", "terminated by client")
            return
        if not isinstance(msg, (list, tuple)) or len(msg) != 2:
            logutil.log("WORKER", f"malformed message {msg!r}", level="WARN")
            continue
        kind, data = msg
        if kind != 'chunk':
            logutil.log("WORKER", f"unknown message {kind!r}", level="WARN")
            continue
        t0 = time.perf_counter()
        reply = handle_request(data)
        payload = pickle.dumps(['chunk', reply], -1)
        conn.send_bytes(payload)
        logutil.log("GEN", f"sent chunk ({reply.get('cx')}, {reply.get('cz')}): "
            f"{(time.perf_counter() - t0) * 1000.0:.1f}ms, {len(payload)} bytes")


def start_worker(name='ChunkWorker'):
    '''spawn a daemon worker process; returns (process, connection)'''
    parent, child = multiprocessing.Pipe()
    proc = multiprocessing.Process(target=serve, args=(child,), name=name, daemon=True)
    proc.start()
    return proc, parent


def request_chunk(conn, cx, cz, seed=0, opts=None):
    '''blocking round trip to a worker started with start_worker'''
    conn.send(['chunk', {'cx': cx, 'cz': cz, 'seed': seed, 'opts': opts}])
    kind, payload = pickle.loads(conn.recv_bytes())
    return payload
