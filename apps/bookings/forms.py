from django import forms


class ReserveForm(forms.Form):
    """
    Shape check for the reserve payload.

    Lengths mirror the Booking columns so oversized values are rejected here
    instead of failing at the database. Missing ids are left to the engine,
    which reports them with its own field names.
    """
    service_id = forms.CharField(max_length=64, required=False)
    customer_id = forms.CharField(max_length=64, required=False)
    start_time = forms.CharField(max_length=64, required=False)
    idempotency_key = forms.CharField(max_length=128, required=False)
    customer_name = forms.CharField(max_length=150, required=False)
    customer_email = forms.EmailField(required=False)
    customer_phone = forms.CharField(max_length=20, required=False)
    notes = forms.CharField(max_length=2000, required=False)

    def first_error(self):
        """(field, message) of the first failing field, in declaration order."""
        for name in self.fields:
            if name in self.errors:
                return name, self.errors[name][0]
        return None, None
