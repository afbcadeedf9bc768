import csv
import logging
import threading
from typing import Dict, Iterable, Iterator, Mapping, Optional, TextIO

from config import EngineConfig
from errors import SystemFailure
from message_queue import InMemoryQueue
from models import ClientAccount, ProcessingStats, Transaction
from record_parser import parse_record
from state_manager import StateManager
from transaction_processor import TransactionProcessor

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Runs one pass over an ordered stream of transaction rows and returns
    the final account states. Rows are applied strictly in input order.
    With config.pipelined, a publisher thread reads and parses the input
    while the calling thread applies transactions.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self._config = config or EngineConfig()
        self._state = StateManager()
        self._processor = TransactionProcessor(self._state)
        self._stats = ProcessingStats()

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        logger.info(f"Processing {filepath} ({'pipelined' if self._config.pipelined else 'sequential'})")
        with open(filepath, "r", newline="", encoding="utf-8", errors="replace") as f:
            if self._config.pipelined:
                self._process_pipelined(f)
            else:
                self.process_rows(csv.DictReader(f, skipinitialspace=True))

        logger.info(f"Processing complete. {self._stats}")
        return self._state.get_all_accounts()

    def process_rows(self, rows: Iterable[Mapping[str, Optional[str]]]) -> Dict[int, ClientAccount]:
        """Parse and apply already-split rows (dicts keyed by type, client, tx, amount)."""
        return self.process_transactions(self._parse_rows(rows))

    def process_transactions(self, transactions: Iterable[Transaction]) -> Dict[int, ClientAccount]:
        for transaction in transactions:
            self._stats.record(self._processor.apply(transaction))
        return self._state.get_all_accounts()

    def _parse_rows(self, rows: Iterable[Mapping[str, Optional[str]]]) -> Iterator[Transaction]:
        rows = iter(rows)
        while True:
            try:
                row = next(rows)
            except StopIteration:
                return
            except csv.Error as e:
                # The reader drops the broken line and resumes at the next one
                self._stats.record_malformed()
                logger.warning(f"Failed to read row: {e}")
                continue

            try:
                yield parse_record(row)
            except SystemFailure as e:
                self._stats.record_malformed()
                logger.warning(f"Failed to parse row {row}: {e}")

    def _process_pipelined(self, f: TextIO) -> None:
        queue = InMemoryQueue(max_size=self._config.queue_max_size)
        publisher_errors = []

        def publish_transactions() -> None:
            """Read CSV and publish parsed transactions to the queue."""
            try:
                for transaction in self._parse_rows(csv.DictReader(f, skipinitialspace=True)):
                    queue.publish_message(transaction)
            except Exception as e:
                publisher_errors.append(e)
            finally:
                queue.shutdown()

        publisher_thread = threading.Thread(target=publish_transactions, daemon=True)
        publisher_thread.start()
        self.process_transactions(self._consume_transactions(queue))
        publisher_thread.join()

        if publisher_errors:
            raise publisher_errors[0]

    def _consume_transactions(self, queue: InMemoryQueue) -> Iterator[Transaction]:
        while True:
            transaction = queue.consume_message()
            if transaction is None:
                if queue.is_drained():
                    break
                continue
            yield transaction
