"""Step-driven computations which can be suspended, cancelled, and interleaved

We want to run long, CPU-bound algorithms without giving each of them its
own thread, driving them instead from some outer loop which also has other
things to do; a UI event loop, say, or a trio program, or a scheduler juggling
a few hundred of them. For that to work, an algorithm has to be broken into
steps, and between any two steps it has to be possible to stop, look at
where the algorithm got to, save it, and carry on later.

So we split an algorithm into three things:
- a context, which is immutable configuration, fixed at creation;
- a state, which is the algorithm's entire working memory;
- a step, a function of (context, state) which does a bounded amount of work,
  records it in the state, and says how things stand.

An engine holds the context and state and runs the step when polled:

```
@computation_step
def count(target: int, state: Counter) -> Completable[int]:
    state.value += 1
    if state.value < target:
        return suspended()
    return done(state.value)

computation = Computation(count, 5, Counter(0))
result = computation.try_compute()
while is_suspended(result):
    do_other_things()
    result = computation.try_compute()
```

Each poll returns an outcome (from the `outcome` library): `outcome.Value`
with the result, or `outcome.Error` of one of:
- Suspended, meaning "poll me again";
- Cancelled, meaning a cancellation request was seen;
- Exhausted, meaning there's nothing left to produce.

These are never raised across a step boundary. A step which has a problem
specific to its domain should return that problem as its value.

Single-value algorithms use Computation and ComputationStep; algorithms
producing a sequence use Generator and GeneratorStep, whose steps return
`done(None)` at the end of the sequence.

Cancellation is cooperative. A CancelToken is made active with
`cancel_scope`, engines check the active tokens before every step, and
setting a token, from any thread, only changes what the next check sees. A
cancelled computation hasn't lost anything; clear the token and poll again.

Since the state between polls is the whole computation, there's no
difference between pausing an engine in memory and saving its state,
throwing the engine away, and building a new one from the saved state
later. See `stepwise.checkpoint`.

Finally, the only thing a scheduler needs from an engine is the poll
methods, so we don't provide a scheduler; `stepwise.interleave` has some
simple owners and trio drivers, as examples of the pattern.

"""
from stepwise.completable import (
    Completable,
    Incomplete, Suspended, Cancelled, Exhausted,
    done, suspended, cancelled, exhausted,
    is_done, is_suspended, is_cancelled, is_exhausted,
)
from stepwise.cancel import (
    CancelSignal, CancelToken, TrioCancelToken,
    cancel_scope, current_signals, check_cancelled, cancellation_outcome,
)
from stepwise.computable import Computable, ComputableResult, ComputableIdentity
from stepwise.generatable import Generatable, Collector
from stepwise.stateful import Stateful, Algorithm, GenAlgorithm
from stepwise.computation import ComputationStep, computation_step, Computation
from stepwise.generator import GeneratorStep, generator_step, Generator
from stepwise.interleave import Interleaver, RoundRobin, PriorityInterleaver, compute_async, agenerate
from stepwise.checkpoint import Serializer, JsonSerializer, PickleSerializer, Checkpoint
