import argparse
from datetime import datetime

from rsa_exponent_bench.benchmark import BenchmarkConfig, ExponentBenchmark
from rsa_exponent_bench.report import print_summary_report


def run(config: BenchmarkConfig):
    print("Starting RSA Exponent Benchmark")
    print("=" * 50)
    print(f"Started at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print("-" * 50)
    print("Parameters:")
    print(f"  - Public Exponents: {list(config.exponents)}")
    print(f"  - Key Size: {config.key_length} bits")
    print(f"  - Keys per Exponent: {config.num_keys}")
    print(f"  - Operations per Key: {config.ops_per_key}")
    print(f"  - Primality Certainty: {config.certainty}")
    print(f"  - Random Seed: {config.seed}")
    print("=" * 50)

    benchmark = ExponentBenchmark.from_config(config)
    results = benchmark.run_all(config.exponents, config.num_keys, config.ops_per_key)
    print_summary_report(results)

    print("\n------- Done --------")


def main():
    parser = argparse.ArgumentParser(description="Benchmark raw RSA with conventional and inflated (e * n) public exponents.")
    parser.add_argument('--exponents', type=int, nargs='+', default=[3, 65537], help="Public exponents to test.")
    parser.add_argument('--num-keys', type=int, default=10, help="Number of keys (and plaintexts) per exponent.")
    parser.add_argument('--ops-per-key', type=int, default=100, help="Timed operations per key.")
    parser.add_argument('--key-size', type=int, default=2048, help="Bit length of the RSA modulus.")
    parser.add_argument('--certainty', type=int, default=2, help="Primality certainty (error probability <= 2^-c).")
    parser.add_argument('--seed', type=int, default=None, help="Random seed for reproducible keys and plaintexts.")
    parser.add_argument('--verbose', action='store_true', help="Print per-key progress.")
    args = parser.parse_args()

    try:
        config = BenchmarkConfig(
            exponents=tuple(args.exponents),
            num_keys=args.num_keys,
            ops_per_key=args.ops_per_key,
            key_length=args.key_size,
            certainty=args.certainty,
            seed=args.seed,
            verbose=args.verbose,
        )
    except ValueError as exc:
        parser.error(str(exc))

    run(config)


if __name__ == '__main__':
    main()
