import logging
import threading
import uuid
from typing import Dict

from receipt_processor.models.receipt import Receipt, StoredReceipt
from receipt_processor.utils.errors import ReceiptNotFoundError

# Configure module logger
logger = logging.getLogger(__name__)

class ReceiptStore:
    """
    In-memory, write-once table of submitted receipts keyed by generated ID

    Entries live for the lifetime of the process. All access to the table
    goes through a single lock so the store can be shared across request
    worker threads.
    """

    def __init__(self):
        """Initialize an empty ReceiptStore"""
        self._receipts: Dict[str, StoredReceipt] = {}
        self._lock = threading.Lock()
        logger.debug("ReceiptStore initialized")

    def submit(self, receipt: Receipt) -> str:
        """
        Store a validated receipt under a freshly generated ID

        Args:
            receipt: The parsed and validated receipt

        Returns:
            str: The ID assigned to the receipt
        """
        receiptId = str(uuid.uuid4())
        stored = StoredReceipt(id=receiptId, receipt=receipt)

        with self._lock:
            self._receipts[receiptId] = stored
            count = len(self._receipts)

        logger.info(f"Stored receipt {receiptId} from '{receipt.retailer}' ({count} total)")
        return receiptId

    def lookup(self, receiptId: str) -> StoredReceipt:
        """
        Get a stored receipt by its exact ID

        Args:
            receiptId: ID previously returned by submit

        Returns:
            StoredReceipt: The stored entry

        Raises:
            ReceiptNotFoundError: If no receipt was stored under that ID
        """
        with self._lock:
            stored = self._receipts.get(receiptId)

        if stored is None:
            logger.warning(f"Receipt not found: {receiptId}")
            raise ReceiptNotFoundError(receiptId)

        return stored

    def __len__(self) -> int:
        with self._lock:
            return len(self._receipts)
