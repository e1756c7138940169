"""Command line interface for mstquant."""
import argparse
import logging
import sys
from pathlib import Path

from mstquant.pipeline import QuantizationPipeline
from mstquant.types import QuantizeConfig, QuantizationError


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog='mstquant',
        description='Reduce an image to K colors by cutting the MST of its distinct colors',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  mstquant photo.png -k 16
  mstquant photo.png -k 8 -o out.png --smooth --sigma 1.5
  mstquant photo.png -k 32 --save-stages stages --validate
        """,
    )

    parser.add_argument(
        'input',
        type=str,
        help='Input image path'
    )

    parser.add_argument(
        '-k', '--colors',
        type=int,
        required=True,
        help='Number of palette colors (K)'
    )

    parser.add_argument(
        '-o', '--output',
        type=str,
        help='Output image path (default: <input>_quantized.png)'
    )

    parser.add_argument(
        '--smooth',
        action='store_true',
        help='Apply Gaussian smoothing before quantization'
    )

    parser.add_argument(
        '--filter-size',
        type=int,
        default=5,
        help='Gaussian filter size, odd (default: 5)'
    )

    parser.add_argument(
        '--sigma',
        type=float,
        default=1.0,
        help='Gaussian smoothing sigma (default: 1.0)'
    )

    parser.add_argument(
        '--save-stages',
        type=str,
        default=None,
        help='Directory to save pipeline stage debug images'
    )

    parser.add_argument(
        '--validate',
        action='store_true',
        help='Report MSE/PSNR/SSIM of the output against the input'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable debug logging'
    )

    return parser


def main(args=None):
    """Main entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    logging.basicConfig(
        level=logging.DEBUG if parsed_args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s'
    )

    # Resolve input path
    input_path = Path(parsed_args.input)
    if not input_path.exists():
        print(f"Error: Input file not found: {input_path}", file=sys.stderr)
        return 1

    # Determine output path
    if parsed_args.output:
        output_path = Path(parsed_args.output)
    else:
        output_path = input_path.with_name(f"{input_path.stem}_quantized.png")

    try:
        config = QuantizeConfig(
            n_colors=parsed_args.colors,
            smooth=parsed_args.smooth,
            filter_size=parsed_args.filter_size,
            sigma=parsed_args.sigma,
            save_stages=Path(parsed_args.save_stages) if parsed_args.save_stages else None,
        )
        if config.save_stages is not None:
            print(f"Debug stages will be saved to: {config.save_stages}")

        pipeline = QuantizationPipeline(config)
        result = pipeline.process(input_path, output_path)

    except (QuantizationError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    height, width = result.image.shape[:2]
    diagnostics = result.diagnostics
    print(f"Processing: {input_path}")
    print(f"  Size: {width}x{height}")
    print(f"  Distinct colors: {diagnostics.distinct_colors}")
    print(f"  MST weight: {diagnostics.mst_weight:.4f}")
    print(f"  Palette: {len(result.palette)} colors")
    print(f"  Time: {diagnostics.elapsed:.3f}s")
    print(f"  Output saved: {output_path}")

    if parsed_args.validate:
        from mstquant.raster_ingest import load_image

        results = pipeline.validate(result, load_image(input_path))
        print(f"\nValidation Results:")
        print(f"  MSE: {results['mse']:.3f}")
        print(f"  PSNR: {results['psnr']:.2f} dB")
        if results['ssim'] is not None:
            print(f"  SSIM: {results['ssim']:.3f}")
        else:
            print(f"  SSIM: n/a (image too small)")

    return 0


if __name__ == '__main__':
    sys.exit(main())
