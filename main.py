from time import sleep, perf_counter

from lazyseq import Source, count_from, iterate


def expensive_transform(x):
    # Simulate a costly step so laziness is visible
    print(f"  computing f({x}) ...")
    sleep(0.2)  # pretend this is expensive
    return x * x


print("\n--- Demo: laziness (no work until pulled) ---")
pipeline = (
    iterate(range(1, 10_000))
    .map(expensive_transform)   # expensive; watch when it runs
    .filter(lambda v: v % 2 == 0)
    .skip(3)
    .take(5)
)

print("Constructed pipeline. No output yet (nothing computed).")
print("\nCollecting (should compute only what's needed for 5 items):")
t0 = perf_counter()
out = pipeline.collect()
t1 = perf_counter()
print(f"Result: {out}")
print(f"Time: {t1 - t0:.2f}s\n")

print("--- Demo: chunks ---")
chunked = (
    iterate(range(1, 12))
    .map(expensive_transform)
    .chunks(4)
    .take(2)  # only first two chunks -> only first 8 items computed
)
print("Two chunks of 4 (should compute exactly 8 items):")
for chunk in chunked:
    print("  chunk:", chunk)
print()

print("--- Demo: partial consumption with by_ref ---")
numbers = iterate([1, 2, 3, 4])
head = numbers.by_ref().take(2).sum()
tail = numbers.sum()
print(f"First two sum to {head}, the rest to {tail}\n")

print("--- Demo: unbounded producers need a bound ---")
print("Odd squares below 100:", count_from(1).step_by(2).map(lambda x: x * x).take_while(lambda x: x < 100).collect())
print("Cycled:", iterate(["a", "b", "c"]).cycle().take(7).collect(str))
print()

print("--- Demo: borrowing vs consuming ---")
scores = Source([88, 92, 95])
print("Borrowed max:", scores.iter().max().unwrap(), "- source still readable:", scores.to_list())
total = scores.into_iter().sum()
print("Consumed sum:", total, "- source consumed:", scores.consumed)
