#!/usr/bin/env python3
"""
Semantic search over synced venues

Embeds the query with the same model used by the sync and ranks stored
documents by cosine similarity.
"""

import click
from colorama import Fore, Style, init
from dotenv import load_dotenv

load_dotenv('.env')

from venue_sync.database.mongodb_client import MongoDBClient
from venue_sync.embeddings.embedder import get_embedder
from venue_sync.models.record import RECORD_TYPES, get_record_type
from venue_sync.utils.config import CONFIG


# Initialize colorama
init(autoreset = True)


def collection_for(type_name: str) -> str:
  for source in CONFIG['sources']:
    if source['type'] == type_name:
      return source.get('collection', type_name)
  return type_name


@click.command()
@click.option('--type', 'type_name', type=click.Choice(list(RECORD_TYPES)), default='conference',
              help='Which kind of venue to search')
@click.option('--limit', default=10, show_default=True, help='Number of results')
@click.argument('query')
def main(type_name, limit, query):
  """Search venues by meaning"""

  record_type = get_record_type(type_name)
  embedder = get_embedder()

  query_vector = embedder.embed_text(query)
  if not query_vector:
    print(f"{Fore.RED}✗ Could not embed the query{Style.RESET_ALL}")
    return

  with MongoDBClient() as db:
    documents = db.find_with_vectors(collection_for(type_name))

  ranked = embedder.rank_by_similarity(query_vector, documents)[:limit]
  print(f"\n{Fore.YELLOW}Found {len(ranked)} {type_name}s for '{query}':{Style.RESET_ALL}")

  for i, (doc, score) in enumerate(ranked, 1):
    print(f"\n{Fore.MAGENTA}[{i}] {record_type.label(doc)}{Style.RESET_ALL}  ({doc['_id']})")
    print(f"    Similarity: {score:.3f}")
    text = record_type.text_projection(doc)
    if text:
      print(f"    {text[:150]}")


if __name__ == "__main__":
  main()
