import logging

from threadboard.config.log import configure_logging
from threadboard.config.settings import DEFAULT_AUTHOR_NAME, LOG_LEVEL
from threadboard.core.models import ThreadWithResponses
from threadboard.core.response_store import PostgresResponseStore
from threadboard.db.postgres import get_app_db
from threadboard.services.thread_reads import read_thread

logger = logging.getLogger(__name__)


def print_window(aggregate: ThreadWithResponses):
    thread = aggregate.thread
    print(f"\n{thread.title} ({thread.response_count})\n")
    for resp in aggregate.responses:
        sage = " [sage]" if resp.is_sage else ""
        print(
            f"{resp.response_number} {resp.display_author_name}{sage} "
            f"{resp.formatted_timestamp} ID:{resp.response.hash_id}"
        )
        print(f"  {resp.response.content}\n")


def repl():
    configure_logging(LOG_LEVEL)

    with get_app_db() as conn:
        store = PostgresResponseStore(conn)

        thread_id = input("Thread id: ").strip()
        print("Query: l50, 42, 10-20, 10-, -20 (Enter for all)\n")

        while True:
            query = input("Query: ").strip()
            if query.lower() in ("exit", "quit", "stop"):
                break

            result = read_thread(
                store,
                logger,
                thread_id_raw=thread_id,
                query_raw=query,
                default_author_name=DEFAULT_AUTHOR_NAME,
            )
            if result.is_err():
                print("Error:", result.error.message)
                continue

            print_window(result.value)


if __name__ == "__main__":
    repl()
