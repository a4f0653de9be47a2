from jinja2 import Environment, FileSystemLoader
import os

class GraphQLQueryBuilder:
    def __init__(self, template_filename):
        base_dir = os.path.dirname(os.path.dirname(__file__))  # /graphql_queries/
        template_dir = os.path.join(base_dir, 'templates')
        self.env = Environment(loader=FileSystemLoader(template_dir))
        self.template = self.env.get_template(template_filename)

    def render(self, **kwargs):
        return self.template.render(**kwargs)

    def build(self):
        return self.render()

class ShopMetadataQueryBuilder(GraphQLQueryBuilder):
    def __init__(self):
        super().__init__("shop_metadata.graphql.j2")

class ResellerContextQueryBuilder(GraphQLQueryBuilder):
    def __init__(self):
        super().__init__("reseller_context.graphql.j2")

    def build(self, locations_limit=1):
        return self.render(locations_limit=locations_limit)

class ProductCreateMutationBuilder(GraphQLQueryBuilder):
    def __init__(self):
        super().__init__("product_create.graphql.j2")

    def build(self, variants_limit=1):
        return self.render(variants_limit=variants_limit)

class VariantsBulkUpdateMutationBuilder(GraphQLQueryBuilder):
    def __init__(self):
        super().__init__("variants_bulk_update.graphql.j2")

class OrderCreateMutationBuilder(GraphQLQueryBuilder):
    def __init__(self):
        super().__init__("order_create.graphql.j2")

class WebhookSubscriptionCreateMutationBuilder(GraphQLQueryBuilder):
    def __init__(self):
        super().__init__("webhook_subscription_create.graphql.j2")

class WebhookSubscriptionsQueryBuilder(GraphQLQueryBuilder):
    def __init__(self):
        super().__init__("webhook_subscriptions.graphql.j2")

    def build(self, limit=50):
        return self.render(limit=limit)
