#!/usr/bin/env python3
"""
Database Setup Script

Verify the MongoDB connection and show per-collection statistics
"""

import click
from dotenv import load_dotenv

load_dotenv('.env')

from venue_sync.database.mongodb_client import MongoDBClient
from venue_sync.utils.config import CONFIG


@click.command()
def main():
  """Setup and verify database"""

  print("="*80)
  print("DATABASE SETUP")
  print("="*80)

  try:
    print("\nConnecting to MongoDB...")
    with MongoDBClient() as db:
      db.ping()

      print("\n✓ Database connection successful!")
      print("\nCurrent Statistics:")
      for source in CONFIG['sources']:
        stats = db.get_statistics(source.get('collection', source['type']))
        print(f"  {stats['collection']}: {stats['total_documents']} documents, "
              f"{stats['embedded']} embedded, {stats['empty_vectors']} with empty vector")

      print("\n✓ Database is ready for use!")

  except Exception as e:
    print(f"\n✗ Error: {e}")
    print("\nTroubleshooting:")
    print("  1. Ensure MongoDB is running (mongod)")
    print("  2. Check MONGO_URI / DB_NAME or config/config.yaml")
    print("  3. Verify network connectivity")


if __name__ == "__main__":
  main()
