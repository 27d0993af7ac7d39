import logging
import math
from datetime import time
from decimal import Decimal
from typing import Dict, Sequence

from receipt_processor.models.receipt import Item, Receipt, parsePurchaseDate, parsePurchaseTime

# Configure module logger
logger = logging.getLogger(__name__)

AFTERNOON_START = time(14, 0)
AFTERNOON_END = time(16, 0)

class PointsCalculator:
    """
    Class to calculate the points a receipt earns

    Points are the sum of seven independent rules, each computed from the
    receipt alone. The calculator holds no state, so a single instance can be
    shared between requests.
    """

    def calculatePoints(self, receipt: Receipt) -> int:
        """
        Calculate the total points for a receipt

        Args:
            receipt: The receipt to score

        Returns:
            int: Total points, never negative

        Raises:
            MalformedInputError: If the purchase date or time cannot be parsed
        """
        breakdown = self.pointsBreakdown(receipt)
        points = sum(breakdown.values())
        logger.debug(f"Points breakdown for '{receipt.retailer}': {breakdown}")
        return points

    def pointsBreakdown(self, receipt: Receipt) -> Dict[str, int]:
        """
        Calculate each rule's contribution separately

        Args:
            receipt: The receipt to score

        Returns:
            Dict mapping rule name to the points it contributed
        """
        return {
            "retailerName": self.retailerNamePoints(receipt.retailer),
            "roundDollarTotal": self.roundDollarPoints(receipt.total),
            "quarterMultipleTotal": self.quarterMultiplePoints(receipt.total),
            "itemPairs": self.itemPairPoints(receipt.items),
            "itemDescriptions": self.itemDescriptionPoints(receipt.items),
            "oddPurchaseDay": self.oddDayPoints(receipt.purchaseDate),
            "afternoonPurchase": self.afternoonPoints(receipt.purchaseTime),
        }

    @staticmethod
    def retailerNamePoints(retailer: str) -> int:
        """One point for every Unicode letter or digit in the retailer name"""
        return sum(1 for char in retailer if char.isalnum())

    @staticmethod
    def roundDollarPoints(total: Decimal) -> int:
        """50 points if the total is a round dollar amount with no cents"""
        return 50 if total % 1 == 0 else 0

    @staticmethod
    def quarterMultiplePoints(total: Decimal) -> int:
        """25 points if the total is a multiple of 0.25"""
        return 25 if total % Decimal("0.25") == 0 else 0

    @staticmethod
    def itemPairPoints(items: Sequence[Item]) -> int:
        """5 points for every two items on the receipt"""
        return (len(items) // 2) * 5

    @staticmethod
    def itemDescriptionPoints(items: Sequence[Item]) -> int:
        """
        Points for items whose trimmed description length is a multiple of 3

        Each qualifying item earns its price multiplied by 0.2, rounded up to
        the nearest integer. A description that is empty after trimming does
        not qualify.
        """
        points = 0
        for item in items:
            length = len(item.shortDescription.strip())
            if length > 0 and length % 3 == 0:
                points += math.ceil(item.price * Decimal("0.2"))
        return points

    @staticmethod
    def oddDayPoints(purchaseDate: str) -> int:
        """6 points if the day in the purchase date is odd"""
        return 6 if parsePurchaseDate(purchaseDate).day % 2 == 1 else 0

    @staticmethod
    def afternoonPoints(purchaseTime: str) -> int:
        """10 points if the purchase time is after 2:00pm and before 4:00pm, both exclusive"""
        purchased = parsePurchaseTime(purchaseTime)
        return 10 if AFTERNOON_START < purchased < AFTERNOON_END else 0
