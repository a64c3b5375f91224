# pstatebalance

Tools to build and solve discrete-time Markov chains that model two
M/M/C/B queues whose servers run at one of six power levels (P-states).
The level of a queue depends on how many customers it holds, through
five thresholds. Customers may be migrated from one queue to the other
to balance them, according to one of two policies (`Policy`):

- `Policy.MIXED` migrates only when the two queues sit at different
  levels and the balanced state, migration cost included, uses less
  energy.
- `Policy.LOSSES` balances whenever the queue lengths differ by more
  than one customer.

The default model (`ModelParameters`) has a buffer of 90 customers per
queue, 10 servers per queue, arrival rates of 30, and per-level service
rates and power figures; the default thresholds (`Thresholds`) are
3, 6, 12, 24 and 48.

## Modules

- `pstatebalance.params`: `ModelParameters`, `Thresholds`, `Policy`.
- `pstatebalance.energy`: `queue_energy`, `state_energy` and
  `plan_migration`, which returns a `Migration` (source queue, target
  state, number of customers moved, energy before and after) or `None`.
- `pstatebalance.chain`: the `Event` enumeration (arrivals, services,
  migrations in each direction, loop), `uniformization_rate`,
  `event_probability` and `next_state`.
- `pstatebalance.generator`: `generate_chain` explores every state
  reachable from `(0, 0)` breadth first and returns a `MarkovChain` of
  `ChainRow`s; `write_chain` writes it to files.
- `pstatebalance.gth`: `read_size`, `read_matrix`, `gth_solve` (the
  Grassmann-Taksar-Heyman algorithm on a dense NumPy matrix) and
  `write_distribution`.
- `pstatebalance.metrics`: `loss_probability`, `mean_customers`,
  `response_time`, `response_time_all`, `level_marginals` and
  `write_level_marginals`.
- `pstatebalance.rewards`: `read_migration_states` reads the migration
  log into `MigrationRecord`s; `migration_sums`, `migration_probability`,
  `migration_energy` and `queue_energy_reward` compute rewards from it.
- `pstatebalance.tgf`: `convert_to_tgf` exports a written chain as a
  Trivial Graph Format file.
- `pstatebalance.heatmap`: `compute_heatmap` gives, for every state,
  the migration the policy applies (`HeatMapEntry`);
  `find_chained_migration` checks that no migration leads into a state
  that would migrate again; `write_heatmap` writes the table.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Command line

Generate the chain for a model called `model`. The first number is ten
times the migration rate (here 2 gives a rate of 0.2); the next five are
the level thresholds. `--policy=mixed` (the default) or
`--policy=losses` may come first. This writes `model.cd` (state coding),
`model.Rii` (transition matrix), `model.sz` (sizes) and
`Migration_States.data` (the states that migrate). None of the three
model files may exist beforehand.

```
pstatebalance-generate -f model 2 3 6 12 24 48
```

Compute the stationary distribution into `model.pi`; the suffix must
start with `R`. The running time is appended to `GTH.time`.

```
pstatebalance-gth -f model Rii
```

Export the chain as a TGF graph into `model.tgf`:

```
pstatebalance-tgf -f model
```

Tabulate the migration decision for every state of the buffer into
`HeatMap.data` (or the file given with `--output`), then check that no
migration leads into another migrating state; the exit status is 1 if
one does.

```
pstatebalance-heatmap --policy mixed --output HeatMap.data
```

## Library use

```python
from pstatebalance.params import ModelParameters, Policy, Thresholds
from pstatebalance.generator import generate_chain, write_chain
from pstatebalance.gth import gth_solve
from pstatebalance.metrics import loss_probability, response_time_all

params = ModelParameters()
thresholds = Thresholds.from_values([3, 6, 12, 24, 48])

chain = generate_chain(0.2, thresholds, params, Policy.MIXED)
write_chain(chain, "model", "Migration_States.data")

rows = sorted(chain.rows, key=lambda row: row.number)
states = [row.state for row in rows]
```

The matrix can be built from the rows and solved directly; note that
`gth_solve` works on a dense square matrix, so memory grows with the
square of the number of states:

```python
import numpy as np

matrix = np.zeros((chain.state_count, chain.state_count))
for row in rows:
    for probability, number in row.successors:
        matrix[row.number, number] = probability
pi = gth_solve(matrix)

loss_probability(states, pi, 1, params)
response_time_all(states, pi, 0.2, params)
```

The energy of a single state and the migration the policy chooses for it
are available directly:

```python
from pstatebalance.energy import plan_migration, state_energy

state_energy(10, 40, thresholds, params, 0)
plan_migration((10, 40), thresholds, params, Policy.MIXED)
```

## What it does not do

The package writes the heat map and graph data as plain text files; it
does not draw plots or graphs itself. The reward functions are library
calls only: there is no command that reads `model.pi` and reports the
measures in one go.