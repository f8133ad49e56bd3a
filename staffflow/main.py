import argparse
import logging

from .config import DEFAULT_PATIENT_COUNT
from .hospital import StaffingSimulation
from .recommendations import format_recommendations


def main(argv=None):
    parser = argparse.ArgumentParser(description="Nurse workload rebalancing simulation")
    parser.add_argument('--patients', type=int, default=DEFAULT_PATIENT_COUNT)
    parser.add_argument('--ticks', type=int, default=25)
    parser.add_argument('--seed', type=int, default=None)
    parser.add_argument('--verbose', action='store_true')
    args = parser.parse_args(argv)

    if args.patients < 0:
        parser.error("--patients must be non-negative")

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    print("=== Staffing Simulation & Rebalancing ===")

    # 1. Initial (deliberately imbalanced) state
    sim = StaffingSimulation(seed=args.seed)
    sim.initialize(args.patients)
    initial = sim.balance()
    print(f"\nInitial balance: {initial.status} (std {initial.std_dev:.2f}, max {initial.max_count})")

    print("\nInitial recommendations:")
    print(format_recommendations(sim.recommendations()))

    # 2. Run ticks
    print(f"\n{'Tick':<5} | {'Pts':<4} | {'Status':<11} | {'Std':<5} | {'Max':<4} | {'Busy':<4}")
    print("-" * 48)
    for _ in range(args.ticks):
        state = sim.tick()
        balance = sim.balance()
        stats = sim.stats()
        print(f"{state.tick:<5} | {len(state.patients):<4} | {balance.status:<11} | "
              f"{balance.std_dev:<5.2f} | {balance.max_count:<4} | {stats.overloaded_staff:<4}")

    # 3. Final detail
    print("\n=== Final Assignments ===")
    for a in sim.get_state().assignments:
        print(f"{a.staff_name:<20} {a.unit:<8} {a.patient_count}/{a.max_patients} pts  "
              f"{a.workload}/{a.max_workload} load  {a.alert}")

    print("\nRecommendations:")
    print(format_recommendations(sim.recommendations()))


if __name__ == "__main__":
    main()
