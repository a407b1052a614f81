"""
Command-line interface for sentiment classification.

Usage examples:

1. Classify a single sentence:
   text-classifier --text "I liked the movie"

2. Use a TorchScript model and custom vocabulary:
   text-classifier --model model.pt --vocab vocab.txt --text "Great film!"

3. Interactive mode:
   text-classifier --interactive

4. Process a file of sentences (one per line):
   text-classifier --input-file texts.txt --output-file results.json
"""

import argparse
import json
import logging
import sys
from typing import Dict, List, Optional

from . import config
from .engines import MODEL_TYPES
from .errors import ClassifierError
from .inference import TextClassifier


def print_separator():
    """Print a visual separator."""
    print("=" * 80)


def print_result(result: Dict):
    """Pretty print a classification result."""
    places = config.OUTPUT_FORMAT['decimal_places']
    print_separator()
    print(f"📝 Input: {result['text']}")
    print()
    print(f"💭 {config.MODEL_CONFIG['task_name']}:")
    print(f"   Label: {result['label']}")
    print(f"   Confidence: {result['confidence']:.{places}%}")
    print(f"   Description: {result['description']}")

    if 'probabilities' in result:
        print("   Probabilities:")
        for label, prob in result['probabilities'].items():
            print(f"      {label}: {prob:.{places}%}")
    print_separator()


def interactive_mode(classifier: TextClassifier, show_probs: bool = False):
    """Run in interactive mode for continuous predictions."""
    print("\n🚀 Interactive Classification Mode")
    print("Type 'quit' or 'exit' to stop, 'help' for commands\n")

    while True:
        try:
            text = input("📝 Enter text to classify: ").strip()
        except (KeyboardInterrupt, EOFError):
            print("\n\n👋 Goodbye!")
            break

        if text.lower() in ['quit', 'exit', 'q']:
            print("👋 Goodbye!")
            break

        if text.lower() == 'help':
            print("\nCommands:")
            print("  - Type any text to classify it")
            print("  - 'quit' or 'exit' to stop")
            print("  - 'help' to show this message\n")
            continue

        if not text:
            print("⚠️  Please enter some text\n")
            continue

        try:
            result = classifier.analyze(text, return_probs=show_probs)
        except ClassifierError as e:
            print(f"❌ Error: {e}\n")
            continue

        print_result(result)
        print()


def batch_process(
    classifier: TextClassifier,
    input_file: str,
    output_file: str,
    show_probs: bool = False
) -> List[Dict]:
    """Classify each non-empty line of a file and save the results as JSON."""
    with open(input_file, 'r', encoding='utf-8') as f:
        texts = [line.strip() for line in f if line.strip()]

    print(f"📂 Processing {len(texts)} texts from {input_file}...")

    results = []
    for i, text in enumerate(texts, 1):
        print(f"   Processing {i}/{len(texts)}...", end='\r')
        results.append(classifier.analyze(text, return_probs=show_probs))

    with open(output_file, 'w', encoding='utf-8') as f:
        json.dump(results, f, indent=2, ensure_ascii=False)

    print(f"\n✅ Results saved to {output_file}")
    return results


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        description='Text Classification CLI - Sentiment Analysis',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    # Model configuration
    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='JSON configuration file (overrides the model and shape options)'
    )
    parser.add_argument(
        '--model',
        type=str,
        default=config.ASSET_PATHS['model'],
        help='Path to the model file (.tflite or TorchScript .pt)'
    )
    parser.add_argument(
        '--model-type',
        type=str,
        choices=MODEL_TYPES,
        default=None,
        help='Model format (inferred from the file suffix by default)'
    )
    parser.add_argument(
        '--vocab',
        type=str,
        default=config.ASSET_PATHS['vocab'],
        help='Path to the vocabulary file'
    )
    parser.add_argument(
        '--max-length',
        type=int,
        default=config.MAX_LENGTH,
        help='Length of the encoded token sequence'
    )
    parser.add_argument(
        '--num-classes',
        type=int,
        default=config.NUM_CLASSES,
        help='Number of classes produced by the model'
    )
    parser.add_argument(
        '--device',
        type=str,
        choices=['cpu', 'cuda'],
        default=None,
        help='Device for TorchScript models (defaults to cuda if available)'
    )
    parser.add_argument(
        '--show-probs',
        action='store_true',
        default=config.OUTPUT_FORMAT['show_probabilities'],
        help='Show probabilities for all classes'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable debug logging'
    )

    # Input modes
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        '--text',
        type=str,
        help='Single text to classify'
    )
    group.add_argument(
        '--interactive',
        action='store_true',
        help='Run in interactive mode'
    )
    group.add_argument(
        '--input-file',
        type=str,
        help='File containing texts to classify (one per line)'
    )

    parser.add_argument(
        '--output-file',
        type=str,
        help='Output file for batch processing results (JSON format)'
    )
    return parser


def load_classifier(args: argparse.Namespace) -> TextClassifier:
    """
    Create the classifier described by the parsed arguments.

    A --config file takes precedence over the individual model options.
    """
    if args.config:
        return TextClassifier.from_config(config.load_config(args.config))

    return TextClassifier.initialize(
        args.vocab,
        args.model,
        max_length=args.max_length,
        num_classes=args.num_classes,
        model_type=args.model_type,
        device=args.device
    )


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv)

    Returns:
        Process exit code
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    if not (args.text is not None or args.interactive or args.input_file):
        parser.print_help()
        return 1

    if args.input_file and not args.output_file:
        print("❌ Error: --output-file is required for batch processing")
        return 1

    print("🔧 Loading model...")
    try:
        classifier = load_classifier(args)
    except (ClassifierError, ValueError) as e:
        print(f"❌ Error loading model: {e}")
        return 1
    print("✅ Model loaded successfully!\n")

    try:
        if args.text is not None:
            print_result(classifier.analyze(args.text, return_probs=args.show_probs))
        elif args.interactive:
            interactive_mode(classifier, show_probs=args.show_probs)
        else:
            batch_process(classifier, args.input_file, args.output_file, show_probs=args.show_probs)
    except (ClassifierError, OSError) as e:
        print(f"❌ Error: {e}")
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
