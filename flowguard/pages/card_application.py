from __future__ import annotations

from flowguard.config.schema import ApplicantProfile
from flowguard.core.exceptions import ReadinessTimeout
from flowguard.core.readiness import TRANSIENT_LOOKUP_ERRORS
from flowguard.pages.base import BasePage
from flowguard.utils.wait import wait_until

VALIDATION_ERROR_WAIT_SECONDS = 10


class HomePage(BasePage):
    landmark = "cards_menu_link"

    def open(self) -> HomePage:
        self.session.navigate(self.suite_config.environment.base_url)
        self.wait_for_page_load()
        self.accept_cookies_if_present()
        return self

    def open_all_cards(self) -> AllCardsPage:
        self.wait_for_visible("cards_menu_link")
        self.click("cards_menu_link")
        return self.goto(AllCardsPage)


class AllCardsPage(BasePage):
    landmark = "gold_card_learn_more"

    def open_gold_card(self) -> GoldCardPage:
        self.scroll_to("gold_card_learn_more")
        self.click("gold_card_learn_more")
        return self.goto(GoldCardPage)


class GoldCardPage(BasePage):
    landmark = "apply_button"

    def start_application(self) -> ApplicationFormPage:
        self.scroll_to("apply_button")
        self.click("apply_button")
        return self.goto(ApplicationFormPage)


class ApplicationFormPage(BasePage):
    landmark = "first_name_input"

    def fill_form(self, applicant: ApplicantProfile | None = None) -> ApplicationFormPage:
        data = applicant or self.suite_config.applicant
        self.type("first_name_input", data.first_name)
        self.type("last_name_input", data.last_name)
        self.type("date_of_birth_input", data.date_of_birth)
        self.type("email_input", data.email)
        self.type("phone_input", data.phone)
        return self

    def submit(self) -> ApplicationFormPage:
        self.scroll_to("submit_button")
        self.click("submit_button")
        return self

    def validation_errors(self) -> list:
        return [
            element
            for element in self.finder.find_all(self.session.driver, "validation_errors")
            if element.is_displayed()
        ]

    def has_validation_errors(self, timeout: float = VALIDATION_ERROR_WAIT_SECONDS) -> bool:
        try:
            wait_until(
                self.validation_errors,
                timeout,
                ignored_exceptions=TRANSIENT_LOOKUP_ERRORS,
                description="validation errors",
            )
        except ReadinessTimeout:
            return False
        return True

    def validation_error_messages(self) -> list[str]:
        return [element.text.strip() for element in self.validation_errors()]
