"""Review form - captures and validates the four mutable review fields."""

from dataclasses import dataclass, replace
from typing import Optional

from .exceptions import ValidationError
from .models import Review
from .ratings import is_half_star

BREWING_METHOD_MAX_LENGTH = 50
BREWING_DESCRIPTION_MAX_LENGTH = 200

# Rating 0 means "not yet rated"; the smallest valid rating is 0.5
UNRATED = 0


@dataclass
class ReviewForm:
    rating: float = UNRATED
    content: str = ''
    brewing_method: str = ''
    brewing_description: str = ''

    @classmethod
    def from_review(cls, review: Review) -> 'ReviewForm':
        """Pre-fill an edit form. The form is a copy; editing it leaves the review untouched."""
        return cls(
            rating=review.rating,
            content=review.content,
            brewing_method=review.brewing_method,
            brewing_description=review.brewing_description or '',
        )

    def copy(self, **changes) -> 'ReviewForm':
        return replace(self, **changes)

    @property
    def is_rated(self) -> bool:
        return self.rating != UNRATED

    def validate(self) -> dict:
        """
        Return field errors; an empty dict means the form can be submitted.
        """
        errors = {}

        if not self.is_rated:
            errors['rating'] = ['Please select a rating.']
        elif not is_half_star(self.rating):
            errors['rating'] = ['Rating must be between 0.5 and 5 in half-star steps.']

        if not (self.content or '').strip():
            errors['content'] = ['Review content cannot be empty.']

        method = (self.brewing_method or '').strip()
        if not method:
            errors['brewingMethod'] = ['Brewing method is required.']
        elif len(method) > BREWING_METHOD_MAX_LENGTH:
            errors['brewingMethod'] = [
                f'Brewing method cannot exceed {BREWING_METHOD_MAX_LENGTH} characters.'
            ]

        if len(self.brewing_description or '') > BREWING_DESCRIPTION_MAX_LENGTH:
            errors['brewingDescription'] = [
                f'Brewing description cannot exceed {BREWING_DESCRIPTION_MAX_LENGTH} characters.'
            ]

        return errors

    def clean(self) -> 'ReviewForm':
        """
        Validate and return a normalized copy.

        Raises:
            ValidationError: With per-field messages if any field is invalid
        """
        errors = self.validate()
        if errors:
            raise ValidationError('Please correct the highlighted fields.', errors=errors)
        return self.copy(
            content=self.content.strip(),
            brewing_method=self.brewing_method.strip(),
            brewing_description=(self.brewing_description or '').strip(),
        )

    def to_payload(self, coffee_id: str) -> dict:
        return {
            'coffeeId': coffee_id,
            'rating': float(self.rating),
            'content': self.content,
            'brewingMethod': self.brewing_method,
            'brewingDescription': self.brewing_description or None,
        }


def empty_form(initial: Optional[Review] = None) -> ReviewForm:
    """A blank create form, or an edit form pre-filled from ``initial``."""
    if initial is None:
        return ReviewForm()
    return ReviewForm.from_review(initial)
