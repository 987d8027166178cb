from models.article import Article, InvalidDocumentError
import logging
from typing import Optional, Iterable, List
import json


class IngestionError(Exception):
    pass


def ingest_one(raw: dict) -> Optional[Article]:
    if not isinstance(raw, dict):
        return None

    try:
        return Article.from_dict(raw)
    except InvalidDocumentError as e:
        logging.warning("Skipping article id=%s: %s", raw.get('id', "<missing>"), e)
        return None


def ingest_many(raw_list: Iterable[dict], continue_on_error=True) -> List[Article]:
    results = []
    seen_ids = set()
    ok_count = 0
    skipped_count = 0

    for raw in raw_list:
        article = ingest_one(raw)

        if article is not None and article.id in seen_ids:
            logging.warning("Skipping duplicate article id=%s", article.id)
            article = None

        if article is None:
            if not continue_on_error:
                raise IngestionError(f"Invalid article in batch: {raw!r:.80}")
            skipped_count += 1
            continue

        seen_ids.add(article.id)
        ok_count += 1
        results.append(article)

    logging.info("Ingested articles: OK=%d SKIP=%d", ok_count, skipped_count)

    return results


def load_json_file(path):
    with open(path, "r", encoding="utf-8") as f:
        first_char = f.read(1)
        f.seek(0)

        # Case 1: JSON array
        if first_char == "[":
            data = json.load(f)

            for item in data:
                if isinstance(item, dict):
                    yield item
                else:
                    logging.warning("Item in JSON file is not an object, skipping")

        # Case 2: NDJSON
        else:
            for lineno, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue

                try:
                    obj = json.loads(line)
                except json.JSONDecodeError as e:
                    logging.warning("Skipping invalid JSON line %d: %s", lineno, e)
                    continue

                if isinstance(obj, dict):
                    yield obj
                else:
                    logging.warning("Line %d is not an object, skipping", lineno)


def load_articles(path, continue_on_error=True) -> List[Article]:
    return ingest_many(load_json_file(path), continue_on_error=continue_on_error)
