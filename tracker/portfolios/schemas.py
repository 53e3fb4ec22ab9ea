from tracker.schemas import CamelModel


class PortfolioSummary(CamelModel):
    id: str
    name: str
