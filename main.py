"""Main entry point for document question answering."""

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from docqa.agents import DocumentQuestionGraph, parse_questions
from docqa.config import DocQASettings
from docqa.document_processor import PDF_MEDIA_TYPE, TEXT_MEDIA_TYPE
from docqa.document_qa import DocumentQA
from docqa.errors import DocQAError


def _media_type(path: Path) -> str:
    return PDF_MEDIA_TYPE if path.suffix.lower() == ".pdf" else TEXT_MEDIA_TYPE


def main():
    """Main function to run document question answering."""
    # Load environment variables
    load_dotenv()
    settings = DocQASettings.from_env()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Check for API key
    if not os.getenv("GOOGLE_API_KEY") and not os.getenv("GROQ_API_KEY"):
        print("Error: No LLM API key found.")
        print("Please set GOOGLE_API_KEY or GROQ_API_KEY in your .env file.")
        sys.exit(1)

    # Parse command line arguments
    parser = argparse.ArgumentParser(
        description="Ask questions about a PDF or text document"
    )
    parser.add_argument("document_path", help="Path to the document file to process")
    parser.add_argument("-q", "--question", action="append", default=[], help="Question to answer (repeatable)")
    parser.add_argument("--questions-json", help="Path to a question payload file (JSON array or MatterTypes object)")
    parser.add_argument("--summary", action="store_true", help="Summarize the document chunk by chunk")
    parser.add_argument("--suggest", action="store_true", help="Suggest three questions about the document")
    parser.add_argument("--pii", nargs="+", metavar="CATEGORY", help="Extract PII of these categories and locate it")
    parser.add_argument("--chunk-size", type=int, default=None, help=f"Max characters per chunk (default: {settings.chunk_size})")

    args = parser.parse_args()
    document_path = Path(args.document_path)

    if not document_path.exists():
        print(f"Error: Document not found at {document_path}")
        sys.exit(1)

    print(f"Processing document: {document_path}")
    print("-" * 50)

    data = document_path.read_bytes()
    media_type = _media_type(document_path)

    try:
        assistant = DocumentQA.from_settings(settings)

        if args.questions_json:
            payload = Path(args.questions_json).read_text(encoding="utf-8")
            questions = parse_questions(payload)
            print(f"Answering {len(questions)} questions...")
            result = DocumentQuestionGraph(assistant, iterative_summary=args.summary).run(data, questions, media_type)
            print(json.dumps(result.model_dump(), indent=2, ensure_ascii=False))
            return

        blocks = assistant.processor.extract(data, media_type)
        count = assistant.load_document(blocks, args.chunk_size)
        print(f"✓ Document loaded: {len(blocks)} text blocks, {count} chunks indexed")

        if args.summary:
            print("\nSummary:")
            print(assistant.summarize())

        for question in args.question:
            print(f"\nQ: {question}")
            print(f"A: {assistant.answer(question)}")

        if args.suggest:
            print("\nSuggested questions:")
            print(assistant.suggest_questions())

        if args.pii:
            text = "\n".join(blocks)
            terms = assistant.extract_sensitive_terms(text, args.pii)
            print(f"\nSensitive terms found: {len(terms)}")
            for term in terms:
                print(f"  - {term}")
            if terms and media_type == PDF_MEDIA_TYPE:
                bounds = assistant.find_text_bounds(data, terms)
                for page, items in sorted(bounds.items()):
                    print(f"  Page {page + 1}: {len(items)} highlighted regions")

    except DocQAError as e:
        print(f"\n✗ {e}")
        sys.exit(1)
    except ValueError as e:
        if "API key" in str(e) or "API_KEY" in str(e):
            print(f"\n✗ {e}")
            sys.exit(1)
        raise


if __name__ == "__main__":
    main()
